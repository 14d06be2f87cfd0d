"""Logging and configuration helpers."""
