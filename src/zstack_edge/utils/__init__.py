"""Shared helpers: signing transport, log sanitization and credential encryption."""
