"""Command-line interface for IAMGuard."""
