"""Catalogmate: schema-less catalog ingestion and relevance-ranked search."""

__version__ = "0.1.0"
