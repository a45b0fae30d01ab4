"""Cooperative cancellation for use cases.

A caller may cancel an operation any time before it commits.  Handlers
check the token right before ``commit()``; a cancelled operation raises
OperationCancelled and its staged changes are discarded.
"""

from __future__ import annotations

import threading


class OperationCancelled(Exception):
    """The caller cancelled the operation before it was committed."""


class CancellationToken:

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.is_cancelled:
            raise OperationCancelled("Operation cancelled before commit")


def check_cancelled(token: CancellationToken | None) -> None:
    if token is not None:
        token.raise_if_cancelled()
