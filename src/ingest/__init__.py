"""Feed ingestion.

This package fetches endpoint results from the feed API and
selectively persists them into the document store.
"""
