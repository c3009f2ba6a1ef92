"""Adapters connecting the import pipeline to storage and file sources."""
