"""Bundled configuration tables and schemas."""
