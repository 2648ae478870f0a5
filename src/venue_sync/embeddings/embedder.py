from sentence_transformers import SentenceTransformer
from typing import Dict, List, Any, Optional, Union
import numpy as np
import os
import threading
from pathlib import Path
from venue_sync.utils.logger import logger
from venue_sync.utils.config import CONFIG

class RecordEmbedder:
  """Handle record embedding generation"""

  def __init__(self, embedding_config: Optional[Dict[str, Any]] = None):
    """Initialize embedder (the model itself is loaded on first use)"""
    embedding_config = embedding_config or CONFIG['models']['embedding']

    self.model_name = embedding_config['model_name']
    self.dimension = embedding_config.get('dimension')
    self.device = embedding_config.get('device', 'cpu')

    self._model = None
    self._load_lock = threading.Lock()

  @property
  def model(self) -> SentenceTransformer:
    """The loaded model; loads it once, even with concurrent callers"""
    if self._model is None:
      with self._load_lock:
        if self._model is None:
          self._model = self._load_model()
    return self._model

  def _load_model(self) -> SentenceTransformer:
    logger.info(f"⏳ Si carica il modello di embedding: {self.model_name}")

    # Try to load from cache first
    model_path = self._get_cached_model_path(self.model_name)

    try:
      model = SentenceTransformer(model_path, device=self.device)
      logger.info("✓ Modello di embedding caricato dalla cache")
    except Exception:
      logger.info("  Cache non trovata, si scarica il modello...")
      # If not in cache, download (requires internet)
      model = SentenceTransformer(self.model_name, device=self.device)
      logger.info("✓ Modello di embedding scaricato e caricato")
    return model

  def _get_cached_model_path(self, model_name: str) -> str:
    """Get the path to cached model, or return model_name if not cached"""
    cache_dir = os.environ.get('HF_HOME',
                   os.path.join(Path.home(), '.cache', 'huggingface'))

    # Convert model name to cache format
    model_cache_name = f"models--{model_name.replace('/', '--')}"
    model_cache_path = os.path.join(cache_dir, 'hub', model_cache_name)

    # Check if model exists in cache
    snapshots_dir = os.path.join(model_cache_path, 'snapshots')
    if os.path.isdir(snapshots_dir):
      snapshots = os.listdir(snapshots_dir)
      if snapshots:
        return os.path.join(snapshots_dir, snapshots[0])

    # Not in cache - will require download
    return model_name

  def embed_text(self, text: str) -> List[float]:
    """
    Generate the embedding for a single text.

    Mean-pooled by the model and L2-normalized. Any failure is logged and
    yields an empty list, so one bad record never stops a sync.
    """
    try:
      embedding = self.model.encode(
        text,
        convert_to_numpy = True,
        normalize_embeddings = True,
        show_progress_bar = False
      )
      return [float(x) for x in np.asarray(embedding).ravel()]
    except Exception as e:
      logger.error(f"✗ Errore di embedding: {e}")
      return []

  @staticmethod
  def cosine_similarity(embedding1: Union[List[float], np.ndarray],
             embedding2: Union[List[float], np.ndarray]) -> float:
    """Calculate cosine similarity between two embeddings"""
    a = np.array(embedding1, dtype=float)
    b = np.array(embedding2, dtype=float)
    norm = np.linalg.norm(a) * np.linalg.norm(b)
    if norm == 0:
      return 0.0
    return float(np.dot(a, b) / norm)

  @staticmethod
  def rank_by_similarity(query_embedding: List[float],
              documents: List[Dict[str, Any]]) -> List[tuple]:
    """
    Rank stored documents by similarity to a query.

    Args:
      query_embedding: Query embedding vector
      documents: Documents carrying a 'vector' field

    Returns:
      Sorted list of tuples (document, similarity_score)
    """
    scored = []
    for doc in documents:
      vector = doc.get('vector') or []
      if len(vector) != len(query_embedding):
        continue
      score = RecordEmbedder.cosine_similarity(query_embedding, vector)
      scored.append((doc, score))

    # Sort by score descending
    scored.sort(key=lambda x: x[1], reverse=True)
    return scored


_shared_embedder: Optional[RecordEmbedder] = None
_shared_lock = threading.Lock()


def get_embedder() -> RecordEmbedder:
  """Process-wide embedder, created on first call"""
  global _shared_embedder
  if _shared_embedder is None:
    with _shared_lock:
      if _shared_embedder is None:
        _shared_embedder = RecordEmbedder()
  return _shared_embedder
