from abc import ABC, abstractmethod
from calendar import timegm
from datetime import datetime


class Clock(ABC):
    """Source of the current time (naive UTC, like the stored columns)"""

    @abstractmethod
    def now(self) -> datetime:
        pass


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.utcnow()


def to_epoch_seconds(moment: datetime) -> int:
    """Whole seconds since the epoch for a naive UTC datetime"""
    return timegm(moment.utctimetuple())


def to_epoch_millis(moment: datetime) -> int:
    """Milliseconds since the epoch for a naive UTC datetime"""
    return to_epoch_seconds(moment) * 1000 + moment.microsecond // 1000
