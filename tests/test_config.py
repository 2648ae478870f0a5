from __future__ import annotations

from venue_sync.utils.config import load_config


def test_missing_file_falls_back_to_defaults(tmp_path):
  config = load_config(tmp_path / "absent.yaml", environ={})

  assert config["database"]["database_name"] == "venues"
  assert config["schedule"]["daily_at"] == "00:00"
  assert [s["type"] for s in config["sources"]] == ["conference", "journal"]


def test_yaml_values_merge_over_defaults(tmp_path):
  path = tmp_path / "config.yaml"
  path.write_text("database:\n  database_name: scholarly\nschedule:\n  daily_at: '03:15'\n")

  config = load_config(path, environ={})

  assert config["database"]["database_name"] == "scholarly"
  assert config["database"]["mongodb_uri"] == "mongodb://localhost:27017/"
  assert config["schedule"]["daily_at"] == "03:15"


def test_environment_overrides(tmp_path):
  environ = {
    "MONGO_URI": "mongodb://db:27017/",
    "DB_NAME": "prod",
    "API_CONFERENCE": "https://api.example.org/conferences",
    "EMBEDDING_MODEL": "sentence-transformers/paraphrase-MiniLM-L3-v2",
  }
  config = load_config(tmp_path / "absent.yaml", environ=environ)

  assert config["database"]["mongodb_uri"] == "mongodb://db:27017/"
  assert config["database"]["database_name"] == "prod"
  assert config["models"]["embedding"]["model_name"] == "sentence-transformers/paraphrase-MiniLM-L3-v2"
  sources = {s["type"]: s for s in config["sources"]}
  assert sources["conference"]["url"] == "https://api.example.org/conferences"
  assert "url" not in sources["journal"]


def test_config_path_from_environment(tmp_path):
  path = tmp_path / "custom.yaml"
  path.write_text("fetch:\n  timeout: 30\n")

  config = load_config(environ={"VENUE_SYNC_CONFIG": str(path)})
  assert config["fetch"]["timeout"] == 30
