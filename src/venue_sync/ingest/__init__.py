from .fetcher import RecordFetcher, FetchError
from .importer import RecordImporter

__all__ = ['RecordFetcher', 'FetchError', 'RecordImporter']
