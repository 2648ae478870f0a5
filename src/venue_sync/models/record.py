from dataclasses import dataclass, asdict
from typing import Tuple, Dict, Any, Optional


@dataclass(frozen=True)
class RecordType:
  """Field layout of one kind of source record"""
  name: str
  id_field: str
  text_fields: Tuple[str, ...]
  label_field: str

  def record_id(self, record: Dict[str, Any]) -> Optional[Any]:
    """Source identifier, used as the document _id"""
    if not isinstance(record, dict):
      return None
    value = record.get(self.id_field)
    if value is None or value == "":
      return None
    return value

  def label(self, record: Dict[str, Any]) -> str:
    """Short human label for progress output"""
    if not isinstance(record, dict):
      return ""
    return str(record.get(self.label_field) or "")

  def text_projection(self, record: Dict[str, Any]) -> str:
    """
    Text to embed for a record.

    The text fields are joined with single spaces and trimmed; missing or
    empty values count as empty strings and list values are comma-joined
    without spaces, like a JavaScript array in a template string.
    """
    parts = []
    for field in self.text_fields:
      value = record.get(field)
      if isinstance(value, (list, tuple)):
        value = ",".join(str(v) for v in value)
      parts.append(str(value) if value else "")
    return " ".join(parts).strip()


CONFERENCE = RecordType(
  name = "conference",
  id_field = "id_conference",
  text_fields = ("name", "acronym", "topics"),
  label_field = "name"
)

JOURNAL = RecordType(
  name = "journal",
  id_field = "id_journal",
  text_fields = ("title", "categories", "areas"),
  label_field = "title"
)

RECORD_TYPES: Dict[str, RecordType] = {
  CONFERENCE.name: CONFERENCE,
  JOURNAL.name: JOURNAL
}


def get_record_type(name: str) -> RecordType:
  """Look up a record type by name"""
  try:
    return RECORD_TYPES[name]
  except KeyError:
    raise ValueError(
      f"Unknown record type '{name}' (expected one of: {', '.join(RECORD_TYPES)})"
    ) from None


@dataclass
class ImportSummary:
  """Outcome of importing one source"""
  collection: str
  total: int = 0
  upserted: int = 0
  modified: int = 0
  skipped: int = 0
  failed: int = 0

  def to_dict(self) -> Dict[str, Any]:
    return asdict(self)

  def __str__(self) -> str:
    return (f"Upserted: {self.upserted}, Modified: {self.modified}, "
            f"Skipped: {self.skipped}, Failed: {self.failed} in {self.collection}")
