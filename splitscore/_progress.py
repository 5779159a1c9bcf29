"""
_progress.py
============
Progress reporting and cooperative cancellation.

Transforms receive a ``ProgressListener`` explicitly (or ``None`` for the
silent default) and report progress once per unit of work: one taxon row of
a distance matrix, one character column of a split scan, one added taxon in
the parsimony splits.  Cancellation is checked at exactly those call sites,
so the numeric optimisers never see it.

Examples
--------
>>> def show(value, maximum):
...     print(f"{value}/{maximum}")
>>> progress = ProgressListener(show)
>>> distances = NucleotideDistance().apply(chars, progress=progress)

Canceling from another thread or from inside the callback:

>>> progress.cancel()
>>> progress.set_progress(10)
Traceback (most recent call last):
...
splitscore._exceptions.CanceledError: Computation canceled
"""

import logging
import threading
from typing import Callable, Optional

from splitscore._exceptions import CanceledError


logger = logging.getLogger(__name__)


ProgressCallback = Callable[[int, int], None]


class ProgressListener:
    """
    Progress sink with a cancellation flag.

    Parameters
    ----------
    callback : callable(value, maximum), optional
        Invoked on every progress update.  May call ``cancel()``.
    """

    def __init__(self, callback: Optional[ProgressCallback] = None) -> None:
        self.callback = callback
        self.maximum = 100
        self.value = 0
        self.task: Optional[str] = None
        self._canceled = threading.Event()

    def subtask(self, name: str) -> None:
        self.check_canceled()
        self.task = name
        logger.debug("Subtask: %s", name)

    def set_maximum(self, maximum: int) -> None:
        self.maximum = maximum

    def set_progress(self, value: int) -> None:
        """Record progress, notify the callback, then honour cancellation."""
        self.value = value
        if self.callback is not None:
            self.callback(value, self.maximum)
        self.check_canceled()

    def cancel(self) -> None:
        self._canceled.set()

    @property
    def is_canceled(self) -> bool:
        return self._canceled.is_set()

    def check_canceled(self) -> None:
        if self._canceled.is_set():
            raise CanceledError(
                f"Computation canceled during {self.task}" if self.task else "Computation canceled"
            )


class NullProgress(ProgressListener):
    """Progress sink that records nothing and is never canceled."""

    def set_progress(self, value: int) -> None:
        self.value = value


def ensure_progress(progress: Optional[ProgressListener]) -> ProgressListener:
    """Return ``progress`` or a fresh ``NullProgress`` when None."""
    return NullProgress() if progress is None else progress
