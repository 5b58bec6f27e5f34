"""Cooperative cancellation for outline scans.

The scanner polls ``is_set()`` at the head of every line loop, so any
``threading.Event`` or ``asyncio.Event`` can serve as a token.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CancellationToken(Protocol):
    def is_set(self) -> bool: ...


class _NeverCancelled:
    __slots__ = ()

    def is_set(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NEVER_CANCELLED"


NEVER_CANCELLED: CancellationToken = _NeverCancelled()
