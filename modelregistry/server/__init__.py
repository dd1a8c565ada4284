"""Model registry HTTP server."""
