"""Debounced, per-document diagnostics scheduling.

Every content change schedules a pass after a quiescence window. A
later change cancels the pass while it is still waiting. A pass that
has already started runs to completion, but its result is published
only if no newer pass was scheduled for the same document meanwhile.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable

from lsprotocol import types as lsp

logger = logging.getLogger(__name__)

Validate = Callable[[str], Awaitable[list[lsp.Diagnostic] | None]]
Publish = Callable[[str, list[lsp.Diagnostic]], None]


class DiagnosticsScheduler:
    """Runs at most one diagnostics pass per pause in typing.

    Args:
        delay: Quiescence window in seconds.
        validate: Coroutine producing diagnostics for a URI from its
            current text, or None when the document is gone.
        publish: Sends diagnostics for a URI to the editor.
    """

    def __init__(self, delay: float, validate: Validate, publish: Publish):
        self._delay = delay
        self._validate = validate
        self._publish = publish
        self._counter = itertools.count(1)
        self._generations: dict[str, int] = {}
        self._pending: dict[str, asyncio.Task] = {}
        self._running: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def schedule(self, uri: str) -> None:
        """Supersede any waiting pass for *uri* and start a new countdown."""
        # Numbers are never reused, even across cancel()
        generation = next(self._counter)
        self._generations[uri] = generation

        existing = self._pending.pop(uri, None)
        if existing is not None:
            existing.cancel()

        self._pending[uri] = asyncio.ensure_future(self._run(uri, generation))

    def cancel(self, uri: str) -> None:
        """Forget *uri*: drop its waiting pass and discard any running one."""
        self._generations.pop(uri, None)
        existing = self._pending.pop(uri, None)
        if existing is not None:
            existing.cancel()

    async def _run(self, uri: str, generation: int) -> None:
        await asyncio.sleep(self._delay)

        # Past the window: from here on the pass is not cancelled by newer changes
        task = asyncio.current_task()
        if self._pending.get(uri) is task:
            del self._pending[uri]
        if task is not None:
            self._running.add(task)
            task.add_done_callback(self._running.discard)

        try:
            diagnostics = await self._validate(uri)
        except Exception:
            logger.exception("Diagnostics pass failed for %s", uri)
            return

        if diagnostics is None:
            return
        if self._generations.get(uri) != generation:
            logger.debug("Discarding superseded diagnostics for %s", uri)
            return
        self._publish(uri, diagnostics)

    async def shutdown(self) -> None:
        """Cancel every waiting and running pass."""
        tasks = [*self._pending.values(), *self._running]
        self._pending.clear()
        self._generations.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
