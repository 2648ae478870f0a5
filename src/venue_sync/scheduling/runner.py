import threading
from typing import Dict, List, Any, Optional, Callable
from venue_sync.database.mongodb_client import MongoDBClient
from venue_sync.embeddings.embedder import RecordEmbedder
from venue_sync.ingest.fetcher import RecordFetcher, FetchError
from venue_sync.ingest.importer import RecordImporter
from venue_sync.models.record import ImportSummary, get_record_type
from venue_sync.utils.logger import logger
from venue_sync.utils.config import CONFIG


class SyncRunner:
  """Run the import of every configured source"""

  def __init__(
      self,
      config: Optional[Dict[str, Any]] = None,
      db_factory: Callable[[Dict[str, Any]], MongoDBClient] = MongoDBClient,
      embedder: Optional[RecordEmbedder] = None,
      fetcher: Optional[RecordFetcher] = None,
      show_progress: bool = True):
    self.config = config or CONFIG
    self.db_factory = db_factory
    self.embedder = embedder
    self.fetcher = fetcher
    self.show_progress = show_progress

    # Resolve record types up front so a typo fails at startup
    self.sources: List[Dict[str, Any]] = []
    for source in self.config.get('sources', []):
      record_type = get_record_type(source['type'])
      self.sources.append({
        "record_type": record_type,
        "collection": source.get('collection', record_type.name),
        "url": source.get('url'),
        "url_env": source.get('url_env')
      })

    self._running = threading.Lock()

  @property
  def is_running(self) -> bool:
    return self._running.locked()

  def run_once(self) -> Optional[Dict[str, ImportSummary]]:
    """
    Import all sources, one after the other.

    Returns the summaries by collection, or None when another run is still
    in progress. Fetch failures are logged per source; database errors
    propagate. The connection is closed in every case.
    """
    if not self._running.acquire(blocking=False):
      logger.warning("⚠ Import già in corso, esecuzione saltata")
      return None

    try:
      return self._run_sources()
    finally:
      self._running.release()

  def _run_sources(self) -> Dict[str, ImportSummary]:
    summaries: Dict[str, ImportSummary] = {}

    with self.db_factory(self.config['database']) as db:
      db.ping()
      importer = RecordImporter(
        db,
        embedder = self.embedder,
        fetcher = self.fetcher,
        show_progress = self.show_progress
      )

      for source in self.sources:
        collection = source['collection']
        if not source['url']:
          logger.warning(f"⚠ Nessun URL configurato per {collection} "
                         f"(variabile {source['url_env']}), sorgente saltata")
          continue

        try:
          summaries[collection] = importer.import_source(
            source['url'], collection, source['record_type']
          )
        except FetchError as e:
          logger.error(f"✗ Errore nell'import di {collection}: {e}")

    return summaries
