import pymongo
from typing import Dict, List, Any, Optional
from pymongo.results import UpdateResult
from venue_sync.utils.logger import logger
from venue_sync.utils.config import CONFIG


class MongoDBClient:
  """MongoDB client for venue document storage"""

  def __init__(self, db_config: Optional[Dict[str, Any]] = None):
    """Initialize MongoDB client"""
    db_config = db_config or CONFIG['database']
    self.db_config = db_config

    # Connect to MongoDB (lazily: the driver connects on first operation)
    self.client = pymongo.MongoClient(
      db_config['mongodb_uri'],
      serverSelectionTimeoutMS = db_config.get('server_selection_timeout_ms', 10000)
    )
    self.db = self.client[db_config['database_name']]

  def __enter__(self) -> 'MongoDBClient':
    return self

  def __exit__(self, exc_type, exc, tb):
    self.close()

  def close(self):
    """Release the connection pool"""
    self.client.close()
    logger.debug("Connessione MongoDB chiusa")

  def ping(self):
    """Verify the server is reachable (raises ConnectionFailure if not)"""
    self.client.admin.command('ping')
    logger.info(f"✓ Connesso a MongoDB ({self.db_config['database_name']})")

  def collection(self, name: str):
    return self.db[name]

  def find_by_id(self, collection_name: str, doc_id: Any) -> Optional[Dict[str, Any]]:
    """Point lookup by primary key"""
    return self.collection(collection_name).find_one({"_id": doc_id})

  def upsert_document(
      self,
      collection_name: str,
      doc_id: Any,
      fields: Dict[str, Any]) -> UpdateResult:
    """Insert the document if absent, otherwise overwrite the given fields"""
    fields = {k: v for k, v in fields.items() if k != "_id"}
    return self.collection(collection_name).update_one(
      {"_id": doc_id},
      {"$set": fields},
      upsert = True
    )

  def count_documents(self, collection_name: str, filter_dict: Optional[Dict[str, Any]] = None) -> int:
    """Count documents matching filter"""
    return self.collection(collection_name).count_documents(filter_dict or {})

  def find_with_vectors(
      self,
      collection_name: str,
      projection: Optional[Dict[str, int]] = None) -> List[Dict[str, Any]]:
    """All documents carrying a non-empty vector (use with caution on large collections)"""
    return list(self.collection(collection_name).find(
      {"vector.0": {"$exists": True}},
      projection
    ))

  def get_statistics(self, collection_name: str) -> Dict[str, Any]:
    """Get collection statistics"""
    total = self.count_documents(collection_name)
    without_vector = self.count_documents(collection_name, {"vector": {"$size": 0}})

    return {
      "collection": collection_name,
      "total_documents": total,
      "empty_vectors": without_vector,
      "embedded": total - without_vector
    }
