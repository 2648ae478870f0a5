import requests
from typing import Dict, List, Any, Optional
from venue_sync.utils.logger import logger
from venue_sync.utils.config import CONFIG


class FetchError(Exception):
  """The source could not be downloaded or is not a JSON array"""


class RecordFetcher:
  """Download record batches from the source APIs"""

  def __init__(self, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
    self.timeout = timeout if timeout is not None else CONFIG['fetch'].get('timeout')
    self.session = session or requests.Session()

  def fetch(self, url: str) -> List[Dict[str, Any]]:
    """GET the url and return its JSON array of records"""
    logger.info(f"📡 Download dei dati da {url}")
    try:
      response = self.session.get(url, timeout = self.timeout)
      response.raise_for_status()
      data = response.json()
    except requests.RequestException as e:
      raise FetchError(f"Download fallito da {url}: {e}") from e
    except ValueError as e:
      # Body is not valid JSON
      raise FetchError(f"Risposta non JSON da {url}: {e}") from e

    if not isinstance(data, list):
      raise FetchError(f"Attesa una lista JSON da {url}, ricevuto {type(data).__name__}")

    return data
