import logging
from pathlib import Path
from typing import Dict, Any, Optional
from tqdm import tqdm

# Third-party loggers that flood the console during a sync
NOISY_LOGGERS = ("pymongo", "sentence_transformers", "urllib3", "filelock")


class TqdmHandler(logging.StreamHandler):
  """Console handler that prints above the running progress bar"""

  def emit(self, record):
    try:
      tqdm.write(self.format(record))
      self.flush()
    except Exception:
      self.handleError(record)


def setup_logger(
  name: str = "venue_sync",
  log_config: Optional[Dict[str, Any]] = None,
  level: Optional[str] = None
):
  """
  Configure the sync logger from the `logging` config section

  Args:
    name: Logger name
    log_config: {'level': ..., 'log_file': ...}; log_file None for console only
    level: Overrides log_config['level'] (e.g. DEBUG from --debug)
  """
  log_config = log_config or {}
  level = level or log_config.get('level', 'INFO')
  log_file = log_config.get('log_file')

  logger = logging.getLogger(name)
  logger.setLevel(getattr(logging, level.upper()))
  logger.handlers.clear()

  console_handler = TqdmHandler()
  console_handler.setFormatter(logging.Formatter(
    "%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%H:%M:%S"
  ))
  logger.addHandler(console_handler)

  if log_file:
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setFormatter(logging.Formatter(
      "%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s",
      datefmt="%Y-%m-%d %H:%M:%S"
    ))
    logger.addHandler(file_handler)

  for noisy in NOISY_LOGGERS:
    logging.getLogger(noisy).setLevel(logging.WARNING)

  return logger

# Global logger instance
logger = logging.getLogger("venue_sync")
