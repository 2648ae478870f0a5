"""Sync conference and journal records into MongoDB with embeddings"""

__version__ = "0.1.0"
