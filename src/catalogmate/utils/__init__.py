"""Shared utilities: settings and helpers."""
