import json
import hashlib
from typing import Dict, Any

# Fields added by the sync itself, never part of the fingerprint
DERIVED_FIELDS = ("vector", "hash")


def content_hash(record: Dict[str, Any]) -> str:
  """
  MD5 fingerprint of a record's content.

  Derived fields are dropped first, so a document read back from the
  database hashes the same as the record that produced it. Key order is
  kept as received.
  """
  content = {k: v for k, v in record.items() if k not in DERIVED_FIELDS}
  payload = json.dumps(content, separators=(",", ":"), default=str)
  return hashlib.md5(payload.encode("utf-8")).hexdigest()
