"""Bundled recipe dataset."""
