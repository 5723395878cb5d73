"""Xtrim: media ingestion and project/timeline model for a timeline editor."""

__version__ = "0.1.0"
