"""
Study Feed Backend

Feed ingestion for the Study module: fetches medical-journal RSS/Atom feeds,
normalizes their items and serves the merged reading list over HTTP.
"""

__version__ = "1.0.0"
