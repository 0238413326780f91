"""Services backing the HTTP API."""
