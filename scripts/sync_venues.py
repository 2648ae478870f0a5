#!/usr/bin/env python3
"""
Venue Sync Script

Fetches conferences and journals from the configured APIs, embeds them and
upserts the changed ones into MongoDB. Runs once at startup, then every day
at the configured time (config/config.yaml -> schedule.daily_at).

Environment (or .env):
  MONGO_URI, DB_NAME, API_CONFERENCE, API_JOURNAL
"""

import sys
import click
from dotenv import load_dotenv

# Environment must be in place before the config is loaded
load_dotenv('.env')

from venue_sync.utils.config import CONFIG
from venue_sync.utils.logger import setup_logger, logger
from venue_sync.scheduling import SyncRunner, DailyScheduler


def run_and_report(runner: SyncRunner) -> bool:
  """Run one sync, log the outcome; False if the run raised"""
  try:
    summaries = runner.run_once()
  except Exception as e:
    logger.error(f"✗ Import fallito: {e}")
    return False

  if summaries is None:
    return True

  for collection, summary in summaries.items():
    logger.info(f"  {collection}: {summary.to_dict()}")
  return True


@click.command()
@click.option('--once', is_flag=True, help='Run a single sync and exit')
@click.option('--at', 'daily_at', default=None,
              help='Daily run time HH:MM (default from config)')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def main(once, daily_at, debug):
  """Sync venue records into MongoDB"""

  setup_logger(log_config = CONFIG['logging'], level = "DEBUG" if debug else None)

  runner = SyncRunner()

  # Run immediately
  ok = run_and_report(runner)
  if once:
    sys.exit(0 if ok else 1)

  scheduler = DailyScheduler(
    lambda: run_and_report(runner),
    at = daily_at or CONFIG['schedule']['daily_at']
  )
  try:
    scheduler.run_forever()
  except KeyboardInterrupt:
    logger.info("Interrotto, arrivederci!")
    scheduler.stop()


if __name__ == "__main__":
  main()
