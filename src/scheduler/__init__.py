"""백그라운드 스케줄러."""

from .dictionary_refresh import DictionaryRefreshScheduler

__all__ = ["DictionaryRefreshScheduler"]
