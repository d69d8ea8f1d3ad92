"""Markdown page loading."""
