"""HTTP API for uploads."""
