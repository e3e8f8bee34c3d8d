"""
User-visible notices.

Pipeline components never raise recoverable failures to their callers;
instead they log them and hand a short toast-style ``Notice`` to a
``Notifier``.  The API layer creates one ``NoticeCollector`` per request
and returns the gathered notices with the response.
"""
import logging
from typing import List, Protocol

from ..models.schemas import Notice, NoticeLevel

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, level: NoticeLevel, message: str) -> None:
        ...


class NoticeCollector:
    """Collects notices in emission order."""

    def __init__(self):
        self._notices: List[Notice] = []

    def notify(self, level: NoticeLevel, message: str) -> None:
        self._notices.append(Notice(level=level, message=message))

    def info(self, message: str) -> None:
        self.notify(NoticeLevel.INFO, message)

    def warning(self, message: str) -> None:
        self.notify(NoticeLevel.WARNING, message)

    def error(self, message: str) -> None:
        self.notify(NoticeLevel.ERROR, message)

    @property
    def notices(self) -> List[Notice]:
        return list(self._notices)


class LoggingNotifier:
    """Default notifier for library use: notices only go to the log."""

    def notify(self, level: NoticeLevel, message: str) -> None:
        if level == NoticeLevel.ERROR:
            logger.error(f"Notice: {message}")
        elif level == NoticeLevel.WARNING:
            logger.warning(f"Notice: {message}")
        else:
            logger.info(f"Notice: {message}")
