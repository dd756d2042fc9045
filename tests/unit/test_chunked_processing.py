# ABOUTME: Unit tests for cooperative chunked reassembly of chapter content.
# ABOUTME: Verifies output fidelity, yielding between slices, and cancellation.

import asyncio

import pytest

from inkshelf.epub.chunked import CHUNK_SIZE, process_content_in_chunks
from inkshelf.epub.errors import Aborted


class _Flag:
    """Minimal cancellation signal."""

    def __init__(self, value: bool = False) -> None:
        self.value = value

    def is_set(self) -> bool:
        return self.value


class TestProcessContentInChunks:
    """Tests for process_content_in_chunks."""

    def test_output_equals_input(self) -> None:
        content = "abcdefghij"
        assert asyncio.run(process_content_in_chunks(content, chunk_size=3)) == content

    def test_large_content_with_default_size(self) -> None:
        content = "x" * (CHUNK_SIZE * 2 + 1)
        assert asyncio.run(process_content_in_chunks(content)) == content

    def test_empty_content(self) -> None:
        assert asyncio.run(process_content_in_chunks("")) == ""

    def test_yields_after_each_slice(self) -> None:
        pauses = 0

        async def count_pause() -> None:
            nonlocal pauses
            pauses += 1

        asyncio.run(process_content_in_chunks("abcdefghij", chunk_size=3, yield_control=count_pause))
        assert pauses == 4

    def test_cancel_between_slices(self) -> None:
        """Setting the signal mid-way aborts at the next slice boundary."""
        flag = _Flag()
        pauses = 0

        async def cancel_after_two() -> None:
            nonlocal pauses
            pauses += 1
            if pauses == 2:
                flag.value = True

        with pytest.raises(Aborted, match="Processing aborted"):
            asyncio.run(
                process_content_in_chunks(
                    "abcdefghij", flag, chunk_size=3, yield_control=cancel_after_two
                )
            )
        assert pauses == 2

    def test_cancelled_before_start(self) -> None:
        with pytest.raises(Aborted):
            asyncio.run(process_content_in_chunks("abc", _Flag(True)))

    def test_asyncio_event_as_signal(self) -> None:
        async def run() -> str:
            event = asyncio.Event()
            task = asyncio.create_task(
                process_content_in_chunks("x" * 100, event, chunk_size=10)
            )
            await asyncio.sleep(0)
            event.set()
            return await task

        with pytest.raises(Aborted):
            asyncio.run(run())

    def test_unset_signal_completes(self) -> None:
        assert asyncio.run(process_content_in_chunks("abc", _Flag(False), chunk_size=1)) == "abc"

    def test_rejects_non_positive_chunk_size(self) -> None:
        with pytest.raises(ValueError, match="chunk_size"):
            asyncio.run(process_content_in_chunks("abc", chunk_size=0))
