"""Command-line interface for FormGuard."""
