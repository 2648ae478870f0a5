from __future__ import annotations

import threading
import time

import numpy as np
import pytest

from venue_sync.embeddings import embedder as embedder_module
from venue_sync.embeddings.embedder import RecordEmbedder

CONFIG = {"model_name": "sentence-transformers/all-MiniLM-L6-v2", "dimension": 3, "device": "cpu"}


class FakeModel:
  loads = 0

  def __init__(self, model_path, device="cpu"):
    time.sleep(0.05)
    FakeModel.loads += 1
    self.encode_kwargs = None

  def encode(self, text, **kwargs):
    self.encode_kwargs = kwargs
    if text == "explode":
      raise RuntimeError("tokenizer failure")
    return np.array([0.6, 0.8, 0.0], dtype=np.float32)


@pytest.fixture(autouse=True)
def fake_model(monkeypatch, tmp_path):
  FakeModel.loads = 0
  monkeypatch.setenv("HF_HOME", str(tmp_path))
  monkeypatch.setattr(embedder_module, "SentenceTransformer", FakeModel)


def test_model_is_loaded_lazily_once():
  embedder = RecordEmbedder(CONFIG)
  assert FakeModel.loads == 0

  embedder.embed_text("ICSE")
  embedder.embed_text("FSE")

  assert FakeModel.loads == 1


def test_concurrent_first_calls_load_once():
  embedder = RecordEmbedder(CONFIG)
  threads = [threading.Thread(target=embedder.embed_text, args=("ICSE",)) for _ in range(8)]
  for t in threads:
    t.start()
  for t in threads:
    t.join()

  assert FakeModel.loads == 1


def test_embed_text_returns_normalized_float_list():
  embedder = RecordEmbedder(CONFIG)
  vector = embedder.embed_text("ICSE ICSE SE")

  assert vector == pytest.approx([0.6, 0.8, 0.0])
  assert all(isinstance(x, float) for x in vector)
  assert embedder.model.encode_kwargs["normalize_embeddings"] is True


def test_embedding_failure_returns_empty_list(caplog):
  embedder = RecordEmbedder(CONFIG)
  assert embedder.embed_text("explode") == []
  assert any("Errore di embedding" in r.message for r in caplog.records)


def test_model_load_failure_returns_empty_list(monkeypatch):
  class Broken:
    def __init__(self, *args, **kwargs):
      raise OSError("no such model")

  monkeypatch.setattr(embedder_module, "SentenceTransformer", Broken)
  assert RecordEmbedder(CONFIG).embed_text("ICSE") == []


def test_cached_model_path_prefers_local_snapshot(tmp_path):
  snapshot = tmp_path / "hub" / "models--sentence-transformers--all-MiniLM-L6-v2" / "snapshots" / "abc123"
  snapshot.mkdir(parents=True)

  embedder = RecordEmbedder(CONFIG)
  assert embedder._get_cached_model_path(CONFIG["model_name"]) == str(snapshot)
  assert embedder._get_cached_model_path("other/model") == "other/model"


def test_rank_by_similarity_orders_and_skips_mismatched_vectors():
  docs = [
    {"_id": "far", "vector": [0.0, 1.0]},
    {"_id": "near", "vector": [1.0, 0.1]},
    {"_id": "empty", "vector": []},
  ]
  ranked = RecordEmbedder.rank_by_similarity([1.0, 0.0], docs)

  assert [doc["_id"] for doc, _ in ranked] == ["near", "far"]
  assert ranked[0][1] > ranked[1][1]


def test_cosine_similarity_of_zero_vector_is_zero():
  assert RecordEmbedder.cosine_similarity([0.0, 0.0], [1.0, 0.0]) == 0.0


def test_get_embedder_returns_shared_instance(monkeypatch):
  monkeypatch.setattr(embedder_module, "_shared_embedder", None)
  assert embedder_module.get_embedder() is embedder_module.get_embedder()
