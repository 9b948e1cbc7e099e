"""Render driver: re-parse on every text chunk, fetch anchor images, re-bind on arrival.

One driver owns one run at a time. A run's raw buffer, anchors and image table
are discarded when the next run starts; image results carry the run id they
were requested under and are dropped when that run is no longer current.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterable, Callable
from typing import Optional

from streampub.core.bind import bind, bind_cover
from streampub.core.models import COVER, Frame, ImageTable, ParsedBuffer, RunStatus, Slot
from streampub.core.parse import parse_buffer
from streampub.errors import GenerationSourceError
from streampub.sources import CredentialProvider, ImageFetcher

logger = logging.getLogger("streampub.driver")

FrameHandler = Callable[[Frame], None]


class RenderDriver:
    """Drives one generation run at a time and publishes Frames to a presenter."""

    def __init__(
        self,
        fetcher: Optional[ImageFetcher] = None,
        on_frame: Optional[FrameHandler] = None,
        *,
        credentials: Optional[CredentialProvider] = None,
        visual_slots: int = 3,
        render_interval: float = 0.0,
        fetch_timeout: float = 60.0,
    ) -> None:
        self._fetcher = fetcher
        self._on_frame = on_frame
        self._credentials = credentials
        self.visual_slots = visual_slots
        self.render_interval = render_interval
        self.fetch_timeout = fetch_timeout

        self._run_id = 0
        self._status = RunStatus.idle
        self._tasks: dict[Slot, asyncio.Task] = {}
        self._reset()

    def _reset(self) -> None:
        self._raw = ""
        self._parsed: ParsedBuffer = parse_buffer("")
        self._table = ImageTable()
        self._dispatched: dict[Slot, str] = {}
        self._tasks = {}
        self._last_render = float('-inf')
        self._frame = self._snapshot()

    # --- state ---

    @property
    def run_id(self) -> int:
        return self._run_id

    @property
    def status(self) -> RunStatus:
        return self._status

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def parsed(self) -> ParsedBuffer:
        return self._parsed

    @property
    def image_table(self) -> ImageTable:
        return self._table

    @property
    def dispatched(self) -> dict[Slot, str]:
        """Descriptions each slot was fetched with during the current run."""
        return dict(self._dispatched)

    @property
    def frame(self) -> Frame:
        """The most recently published Frame."""
        return self._frame

    # --- run lifecycle ---

    def start_run(self) -> int:
        """Discard all per-run state, cancel the previous run's fetches, return the new run id."""
        self._cancel_fetches()
        self._run_id += 1
        self._status = RunStatus.streaming
        self._reset()
        logger.info("Run %d started", self._run_id)
        return self._run_id

    def feed(self, chunk: str, *, force: bool = False) -> Frame | None:
        """Append a chunk and re-render, unless coalesced by render_interval.

        Returns the published Frame, or None when the render was skipped.
        """
        self._raw += chunk
        now = time.monotonic()
        if not force and self.render_interval and now - self._last_render < self.render_interval:
            return None
        return self._render(now)

    def finish(self) -> Frame:
        """Mark the text stream complete and render the final buffer state."""
        self._status = RunStatus.done
        logger.info("Run %d finished: %d chars, %d blocks", self._run_id, len(self._raw), len(self._parsed.blocks))
        return self._render(time.monotonic())

    def fail(self) -> Frame:
        """Mark the run failed and stop its outstanding fetches."""
        self._status = RunStatus.failed
        self._cancel_fetches()
        return self._publish()

    def on_image(self, run_id: int, slot: Slot, data: bytes) -> Frame | None:
        """Store fetched image data and re-bind only; stale runs are ignored."""
        if run_id != self._run_id:
            logger.debug("Dropping image for slot %s from stale run %d", slot, run_id)
            return None
        self._table.set(slot, data)
        logger.debug("Run %d: image for slot %s arrived (%d bytes)", run_id, slot, len(data))
        return self._publish()

    async def wait_images(self) -> None:
        """Wait for every fetch dispatched in the current run to settle."""
        if self._tasks:
            await asyncio.gather(*self._tasks.values(), return_exceptions=True)

    async def run(self, source: AsyncIterable[str], *, wait_images: bool = True) -> Frame:
        """Consume source chunk by chunk for a fresh run and return the final Frame.

        Raises GenerationSourceError if the source itself fails.
        """
        if self._credentials is not None and not self._credentials.has_credential():
            self._credentials.request_credential()

        run_id = self.start_run()
        chunks = aiter(source)
        while True:
            try:
                chunk = await anext(chunks)
            except StopAsyncIteration:
                break
            except Exception as e:
                self.fail()
                logger.error("Run %d failed: %s", run_id, e)
                if isinstance(e, GenerationSourceError):
                    raise
                raise GenerationSourceError(f"Text source failed during run {run_id}: {e}") from e
            if chunk:
                self.feed(chunk)
            # let in-flight fetches progress between chunks
            await asyncio.sleep(0)

        self.finish()
        if wait_images:
            await self.wait_images()
        return self._frame

    # --- internals ---

    def _render(self, now: float) -> Frame:
        self._last_render = now
        self._parsed = parse_buffer(self._raw)
        self._dispatch()
        return self._publish()

    def _dispatch(self) -> None:
        """Start one fetch per newly seen anchor slot, using its first-seen description.

        Outside a running event loop nothing is dispatched; pending slots are
        picked up by the next render inside one.
        """
        if self._fetcher is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        anchors = self._parsed.anchors
        for slot in anchors.slots():
            if slot in self._dispatched:
                continue
            if slot != COVER and slot > self.visual_slots:
                continue
            description = anchors.first_seen[slot]
            logger.debug("Run %d: fetching slot %s: %s", self._run_id, slot, description)
            self._tasks[slot] = loop.create_task(self._fetch(self._run_id, slot, description))
            self._dispatched[slot] = description

    async def _fetch(self, run_id: int, slot: Slot, description: str) -> None:
        try:
            data = await asyncio.wait_for(self._fetcher.fetch(description), self.fetch_timeout)
        except Exception as e:
            # failures are not retried; the slot stays pending
            logger.warning("Run %d: image fetch for slot %s failed: %r", run_id, slot, e)
            return
        if not data:
            logger.warning("Run %d: image fetch for slot %s returned no data", run_id, slot)
            return
        self.on_image(run_id, slot, data)

    def _cancel_fetches(self) -> None:
        for task in self._tasks.values():
            if not task.done():
                task.cancel()

    def _snapshot(self) -> Frame:
        return Frame(
            run_id=self._run_id,
            status=self._status,
            anchors=self._parsed.anchors,
            cover=bind_cover(self._table),
            entries=bind(self._parsed.blocks, self._table),
        )

    def _publish(self) -> Frame:
        self._frame = self._snapshot()
        if self._on_frame is not None:
            self._on_frame(self._frame)
        return self._frame
