from .runner import SyncRunner
from .scheduler import DailyScheduler

__all__ = ['SyncRunner', 'DailyScheduler']
