# ABOUTME: Cooperative, cancellable reassembly of large chapter strings.
# ABOUTME: Yields to the event loop between fixed-size slices so rendering never hogs it.

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from inkshelf.epub.errors import Aborted

logger = logging.getLogger(__name__)

CHUNK_SIZE = 50_000


class CancelSignal(Protocol):
    """Anything with an ``is_set()`` flag: asyncio.Event, threading.Event, ..."""

    def is_set(self) -> bool: ...


async def _yield_to_loop() -> None:
    # asyncio has no idle-priority queue; a zero sleep defers to every ready task.
    await asyncio.sleep(0)


async def process_content_in_chunks(
    content: str,
    cancel: CancelSignal | None = None,
    *,
    chunk_size: int = CHUNK_SIZE,
    yield_control: Callable[[], Awaitable[None]] | None = None,
) -> str:
    """Reassemble content slice by slice, yielding control between slices.

    The cancellation signal is checked before every slice. The content is
    not transformed; the output equals the input unless processing is
    aborted.

    Args:
        content: The markup to process.
        cancel: Optional cancellation signal.
        chunk_size: Characters per slice.
        yield_control: Coroutine function awaited after each slice; defaults
            to a zero-length sleep on the running loop.

    Returns:
        The reassembled content.

    Raises:
        Aborted: If the signal is set before the last slice completes.
        ValueError: If chunk_size is not positive.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    pause = yield_control or _yield_to_loop

    pieces: list[str] = []
    cursor = 0
    while True:
        if cancel is not None and cancel.is_set():
            logger.debug("Chunked processing aborted at offset %d of %d", cursor, len(content))
            raise Aborted("Processing aborted")

        chunk = content[cursor:cursor + chunk_size]
        if not chunk:
            break
        pieces.append(chunk)
        cursor += chunk_size
        await pause()

    return "".join(pieces)
