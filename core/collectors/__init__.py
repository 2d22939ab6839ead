from .history_collector import HistoryCollector

__all__ = ["HistoryCollector"]
