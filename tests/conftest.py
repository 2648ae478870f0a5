from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
  sys.path.append(str(SRC))

from venue_sync.database.mongodb_client import MongoDBClient


class FakeCollection:
  """In-memory stand-in for the few pymongo collection calls we use"""

  def __init__(self):
    self.docs = {}
    self.writes = 0
    self.fail_on = {}

  def find_one(self, filter_dict):
    doc = self.docs.get(filter_dict["_id"])
    return dict(doc) if doc is not None else None

  def update_one(self, filter_dict, update, upsert=False):
    doc_id = filter_dict["_id"]
    if doc_id in self.fail_on:
      raise self.fail_on[doc_id]

    self.writes += 1
    fields = update["$set"]
    existing = self.docs.get(doc_id)
    if existing is None:
      self.docs[doc_id] = {"_id": doc_id, **fields}
      return SimpleNamespace(upserted_id=doc_id, modified_count=0, matched_count=0)

    updated = {**existing, **fields}
    modified = updated != existing
    self.docs[doc_id] = updated
    return SimpleNamespace(upserted_id=None, modified_count=int(modified), matched_count=1)

  def count_documents(self, filter_dict):
    if not filter_dict:
      return len(self.docs)
    if filter_dict == {"vector": {"$size": 0}}:
      return sum(1 for d in self.docs.values() if d.get("vector") == [])
    raise NotImplementedError(filter_dict)

  def find(self, filter_dict, projection=None):
    return [dict(d) for d in self.docs.values() if d.get("vector")]


class FakeDatabase(dict):
  def __missing__(self, name):
    self[name] = FakeCollection()
    return self[name]


class FakeEmbedder:
  """Deterministic embedder; returns `empty_for` texts as failures"""

  def __init__(self, empty_for=()):
    self.calls = []
    self.empty_for = set(empty_for)

  def embed_text(self, text):
    self.calls.append(text)
    if text in self.empty_for:
      return []
    return [float(len(text)), 1.0, 0.0]


class FakeFetcher:
  def __init__(self, payloads=None):
    self.payloads = payloads or {}
    self.requested = []

  def fetch(self, url):
    self.requested.append(url)
    payload = self.payloads[url]
    if isinstance(payload, Exception):
      raise payload
    return [dict(r) if isinstance(r, dict) else r for r in payload]


def make_db():
  client = MongoDBClient({
    "mongodb_uri": "mongodb://localhost:27017/",
    "database_name": "venues_test",
    "server_selection_timeout_ms": 100
  })
  client.db = FakeDatabase()
  client.ping = lambda: None
  return client


@pytest.fixture()
def db():
  client = make_db()
  try:
    yield client
  finally:
    client.close()

