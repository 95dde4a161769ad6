"""
journalfeed: RSS ingestion and AI summaries for academic journals.
"""

__version__ = "0.1.0"
