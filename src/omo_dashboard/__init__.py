"""Read-only, sanitized views over an OpenCode session store."""

__version__ = "0.1.0"
