"""Shared logging and error-message utilities."""
