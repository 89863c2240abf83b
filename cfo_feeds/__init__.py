"""CFO feed ingestion: fetch, enrich, classify and store finance articles."""

__version__ = "0.1.0"
