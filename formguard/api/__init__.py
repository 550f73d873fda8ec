"""HTTP API for FormGuard."""
