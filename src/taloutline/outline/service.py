"""Background outline scans with supersession.

Editors ask for a fresh outline on every edit. ``OutlineService`` runs scans
on a worker thread and, when a newer request arrives for the same document
key, cancels the scan still in flight so it stops at its next line loop.
"""

from __future__ import annotations

import asyncio
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field

import structlog

from taloutline.core.errors import InternalError
from taloutline.core.logging import clear_scan_id, set_scan_id
from taloutline.outline.builder import DEFAULT_MAIN_PREFIX, build_outline
from taloutline.outline.document import TextDocument
from taloutline.outline.models import OutlineResult

logger = structlog.get_logger()


@dataclass
class OutlineService:
    """
    Non-blocking outline scanner.

    Design:
    - Scans run on a ThreadPoolExecutor (one worker by default)
    - Each document key has at most one live cancellation event
    - Submitting for a key sets the previous event for that key
    """

    main_prefix: str = DEFAULT_MAIN_PREFIX
    max_workers: int = 1

    _executor: ThreadPoolExecutor | None = field(default=None, init=False)
    _inflight: dict[str, threading.Event] = field(default_factory=dict, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    def start(self) -> None:
        if self._executor is not None:
            return
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="tal-outline-scan",
        )
        logger.debug("outline_service_started", max_workers=self.max_workers)

    def stop(self) -> None:
        """Cancel in-flight scans and wait for the worker to drain."""
        with self._lock:
            for event in self._inflight.values():
                event.set()
            self._inflight.clear()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        logger.debug("outline_service_stopped")

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._inflight)

    def submit(self, key: str, document: TextDocument) -> Future[OutlineResult]:
        """Schedule a scan of ``document``, superseding any scan for ``key``."""
        if self._executor is None:
            self.start()
        assert self._executor is not None

        event = threading.Event()
        with self._lock:
            previous = self._inflight.get(key)
            if previous is not None:
                previous.set()
                logger.debug("outline_scan_superseded", key=key)
            self._inflight[key] = event

        return self._executor.submit(self._scan, key, document, event)

    def cancel(self, key: str) -> bool:
        """Cancel the in-flight scan for ``key``. Returns False if there was none."""
        with self._lock:
            event = self._inflight.pop(key, None)
        if event is None:
            return False
        event.set()
        return True

    async def outline(self, key: str, document: TextDocument) -> OutlineResult:
        """Async variant of :meth:`submit`."""
        return await asyncio.wrap_future(self.submit(key, document))

    def _scan(self, key: str, document: TextDocument, event: threading.Event) -> OutlineResult:
        set_scan_id()
        try:
            if event.is_set():
                return OutlineResult(status="cancelled", line_count=document.line_count)
            return build_outline(document, event, main_prefix=self.main_prefix)
        except Exception as e:
            logger.exception("outline_scan_failed", key=key)
            raise InternalError.unexpected(str(e), key=key) from e
        finally:
            with self._lock:
                if self._inflight.get(key) is event:
                    del self._inflight[key]
            clear_scan_id()
