"""Public API for bee_sync package."""

__version__ = "0.1.0"

from .client import ApiClient, fetch_all
from .sync import Syncer, sync_conversations, sync_daily_logs
from .writer import write_by_date

__all__ = ["ApiClient", "Syncer", "fetch_all", "sync_conversations", "sync_daily_logs", "write_by_date"]
