"""Tests for configuration loading."""

from storesync.config import Config, load_config


class TestDefaults:

    def test_defaults(self):
        config = Config()

        assert config.authority.url == "http://localhost:5000"
        assert config.authority.timeout_seconds == 30.0
        assert config.storefront.url == "http://127.0.0.1:8080/shop"
        assert config.dashboard.port == 8080

    def test_base_url_strips_slash(self):
        config = Config()
        config.authority.url = "http://orchestrator:5000/"

        assert config.authority.base_url == "http://orchestrator:5000"

    def test_no_path(self):
        config = load_config(None)
        assert config.authority.url == "http://localhost:5000"

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(tmp_path / "nope.yaml")
        assert config.authority.url == "http://localhost:5000"


class TestYaml:

    def test_load_sections(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "authority:\n"
            "  url: http://orchestrator:5000\n"
            "  timeout_seconds: 5\n"
            "storefront:\n"
            "  url: http://shop.local/shop\n"
            "dashboard:\n"
            "  port: 9000\n"
        )

        config = load_config(path)

        assert config.authority.url == "http://orchestrator:5000"
        assert config.authority.timeout_seconds == 5.0
        assert config.storefront.url == "http://shop.local/shop"
        assert config.dashboard.port == 9000
        assert config.dashboard.host == "0.0.0.0"

    def test_partial_section_keeps_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("authority:\n  url: http://other:5000\n")

        config = load_config(path)

        assert config.authority.timeout_seconds == 30.0

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        config = load_config(path)

        assert config == Config()


class TestEnvOverrides:

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("authority:\n  url: http://from-file:5000\n")
        monkeypatch.setenv("STORESYNC_AUTHORITY_URL", "http://from-env:5000")
        monkeypatch.setenv("STORESYNC_AUTHORITY_TIMEOUT", "2.5")
        monkeypatch.setenv("STORESYNC_STOREFRONT_URL", "http://env-shop/shop")
        monkeypatch.setenv("STORESYNC_DASHBOARD_PORT", "8123")

        config = load_config(path)

        assert config.authority.url == "http://from-env:5000"
        assert config.authority.timeout_seconds == 2.5
        assert config.storefront.url == "http://env-shop/shop"
        assert config.dashboard.port == 8123
