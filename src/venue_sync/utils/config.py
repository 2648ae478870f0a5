import os
import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional

_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / 'config' / 'config.yaml'

DEFAULTS: Dict[str, Any] = {
  "database": {
    "mongodb_uri": "mongodb://localhost:27017/",
    "database_name": "venues",
    "server_selection_timeout_ms": 10000
  },
  "models": {
    "embedding": {
      "model_name": "sentence-transformers/all-MiniLM-L6-v2",
      "dimension": 384,
      "device": "cpu"
    }
  },
  "sources": [
    {"type": "conference", "collection": "conference", "url_env": "API_CONFERENCE"},
    {"type": "journal", "collection": "journal", "url_env": "API_JOURNAL"}
  ],
  "fetch": {"timeout": None},
  "schedule": {"daily_at": "00:00"},
  "logging": {"level": "INFO", "log_file": "logs/sync.log"}
}

# environment variable -> (section, key) in the config tree
ENV_OVERRIDES = {
  "MONGO_URI": ("database", "mongodb_uri"),
  "DB_NAME": ("database", "database_name"),
  "SYNC_DAILY_AT": ("schedule", "daily_at"),
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
  """Recursively merge override into a copy of base"""
  merged = copy.deepcopy(base)
  for key, value in override.items():
    if isinstance(value, dict) and isinstance(merged.get(key), dict):
      merged[key] = _merge(merged[key], value)
    else:
      merged[key] = copy.deepcopy(value)
  return merged


def apply_env_overrides(config: Dict[str, Any], environ=None) -> Dict[str, Any]:
  """Overlay environment variables on a loaded config (in place)"""
  environ = os.environ if environ is None else environ

  for env_var, (section, key) in ENV_OVERRIDES.items():
    if environ.get(env_var):
      config.setdefault(section, {})[key] = environ[env_var]

  if environ.get("EMBEDDING_MODEL"):
    config["models"]["embedding"]["model_name"] = environ["EMBEDDING_MODEL"]

  # Each source names the variable holding its URL
  for source in config.get("sources", []):
    url_env = source.get("url_env")
    if url_env and environ.get(url_env):
      source["url"] = environ[url_env]

  return config


def load_config(path: Optional[str] = None, environ=None) -> Dict[str, Any]:
  """
  Load the YAML configuration on top of the built-in defaults.

  The file is looked up in `path`, then $VENUE_SYNC_CONFIG, then
  config/config.yaml at the repository root. A missing file leaves the
  defaults in place.
  """
  environ = os.environ if environ is None else environ
  config_path = Path(path or environ.get("VENUE_SYNC_CONFIG") or _CONFIG_PATH)

  data = {}
  if config_path.exists():
    with open(config_path, 'r', encoding='utf-8') as f:
      data = yaml.safe_load(f) or {}

  return apply_env_overrides(_merge(DEFAULTS, data), environ)


# Automatically load when module is imported
CONFIG = load_config()
