"""Web dashboard for storesync.

Serves the session's store snapshot and event log as JSON and exposes the
create and delete actions over HTTP, using FastAPI.
"""

from .app import create_app

__all__ = ["create_app"]
