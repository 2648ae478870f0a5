import threading
from datetime import datetime, timedelta, time
from typing import Callable, Optional
from venue_sync.utils.logger import logger


def parse_daily_time(value: str) -> time:
  """Parse 'HH:MM' into a time of day"""
  if not isinstance(value, str):
    # unquoted 03:15 in YAML 1.1 is the base-60 integer 195
    raise ValueError(
      f"Orario non valido {value!r}: usare una stringa HH:MM (tra virgolette nel YAML)"
    )
  try:
    hour, minute = (int(part) for part in value.split(":"))
    return time(hour = hour, minute = minute)
  except ValueError:
    raise ValueError(f"Orario non valido '{value}', formato atteso HH:MM") from None


class DailyScheduler:
  """Fire a job once a day at a fixed time"""

  def __init__(
      self,
      job: Callable[[], object],
      at: str = "00:00",
      clock: Callable[[], datetime] = datetime.now):
    self.job = job
    self.at = parse_daily_time(at)
    self.clock = clock
    self._stop = threading.Event()
    self._workers = []

  def next_run(self, now: datetime) -> datetime:
    """First fire time strictly after now"""
    candidate = datetime.combine(now.date(), self.at)
    if candidate <= now:
      candidate += timedelta(days=1)
    return candidate

  def run_forever(self):
    """Block, firing the job at every scheduled time until stop() is called"""
    target = self.next_run(self.clock())
    logger.info(f"ℹ Prossimo import programmato: {target:%Y-%m-%d %H:%M}")

    while not self._stop.is_set():
      remaining = (target - self.clock()).total_seconds()
      if remaining > 0:
        self._stop.wait(remaining)
        continue

      self.fire()
      target = self.next_run(target)
      logger.info(f"ℹ Prossimo import programmato: {target:%Y-%m-%d %H:%M}")

  def fire(self) -> threading.Thread:
    """Start the job in a worker thread"""
    logger.info("⏳ Avvio dell'import giornaliero...")
    self._workers = [w for w in self._workers if w.is_alive()]
    worker = threading.Thread(target=self._run_job, name="venue-sync-run", daemon=True)
    self._workers.append(worker)
    worker.start()
    return worker

  def _run_job(self):
    try:
      self.job()
    except Exception:
      logger.exception("✗ Import giornaliero fallito")

  def stop(self, wait: Optional[float] = None):
    """Stop the loop; optionally wait for running jobs"""
    self._stop.set()
    if wait is not None:
      for worker in self._workers:
        worker.join(wait)
