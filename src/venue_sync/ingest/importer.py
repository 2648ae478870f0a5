from typing import Dict, Any, Optional
from tqdm import tqdm
from bson.errors import BSONError
from pymongo.errors import ConnectionFailure, PyMongoError
from venue_sync.database.mongodb_client import MongoDBClient
from venue_sync.embeddings.embedder import RecordEmbedder, get_embedder
from venue_sync.ingest.fetcher import RecordFetcher
from venue_sync.models.record import RecordType, ImportSummary
from venue_sync.utils.hashing import content_hash
from venue_sync.utils.logger import logger


class RecordImporter:
  """Synchronize one source API into one collection"""

  def __init__(
      self,
      db: MongoDBClient,
      embedder: Optional[RecordEmbedder] = None,
      fetcher: Optional[RecordFetcher] = None,
      show_progress: bool = True):
    """Initialize importer"""
    self.db = db
    self.embedder = embedder or get_embedder()
    self.fetcher = fetcher or RecordFetcher()
    self.show_progress = show_progress

  def import_source(
      self,
      source_url: str,
      collection_name: str,
      record_type: RecordType) -> ImportSummary:
    """
    Fetch all records from source_url and upsert the changed ones.

    Raises FetchError if the batch cannot be downloaded; ConnectionFailure
    from the database is not caught either. Any other storage error only
    fails the record it happened on.
    """
    records = self.fetcher.fetch(source_url)
    logger.info(f"📦 Ricevuti {len(records)} record per {collection_name}")

    summary = ImportSummary(collection = collection_name, total = len(records))

    bar = tqdm(
      records,
      desc = collection_name,
      unit = "doc",
      disable = not self.show_progress
    )
    for record in bar:
      try:
        outcome = self.import_record(record, collection_name, record_type)
      except ConnectionFailure:
        bar.close()
        raise
      except (PyMongoError, BSONError, OverflowError) as e:
        # Operation errors and documents BSON cannot encode (e.g. ints >= 2**63)
        logger.error(f"✗ Errore MongoDB su {collection_name} doc "
                     f"{record_type.record_id(record)}: {e}")
        outcome = "failed"

      setattr(summary, outcome, getattr(summary, outcome) + 1)
      bar.set_postfix_str(record_type.label(record)[:40])

    bar.close()
    logger.info(f"✓ {summary}")
    return summary

  def import_record(
      self,
      record: Dict[str, Any],
      collection_name: str,
      record_type: RecordType) -> str:
    """
    Sync a single record.

    Returns the outcome: 'upserted', 'modified', 'skipped' or 'failed'.
    """
    if not isinstance(record, dict):
      logger.warning(f"⚠ Elemento non valido in {collection_name} ({type(record).__name__}), ignorato")
      return "failed"

    doc_id = record_type.record_id(record)
    if doc_id is None:
      logger.warning(f"⚠ Record senza '{record_type.id_field}' in {collection_name}, ignorato")
      return "failed"

    text_to_embed = record_type.text_projection(record)
    record_hash = content_hash(record)

    # Skip if unchanged
    existing = self.db.find_by_id(collection_name, doc_id)
    if existing and existing.get("hash") == record_hash:
      return "skipped"

    vector = self.embedder.embed_text(text_to_embed)
    if not vector:
      logger.warning(f"⚠ Embedding vuoto per {collection_name} doc: {doc_id}")

    document = dict(record)
    document["_id"] = doc_id
    document["vector"] = vector
    document["hash"] = record_hash

    result = self.db.upsert_document(collection_name, doc_id, document)

    if result.upserted_id is not None:
      return "upserted"
    if result.modified_count:
      return "modified"
    # Matched but nothing changed, e.g. a concurrent writer got there first
    return "skipped"
