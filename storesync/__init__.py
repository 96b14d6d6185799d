"""storesync: keep a live local view of provisioned stores and act on them."""

__version__ = "0.1.0"
