"""CaptureCycle — capture → normalize → prompt → analyze → display, one photo at a time.

State per cycle:

    IDLE → CAPTURING → NORMALIZING → REQUESTING → DISPLAYING → IDLE
                     ↘ FAILED → IDLE  (on any error, timeout or cancellation)

A trigger that arrives while the cycle is not IDLE is rejected with
CaptureBusyError; nothing is captured for it. Once the result or error has
been handed to the sink (DISPLAYING or FAILED) the cycle can no longer be
cancelled, so the user never sees both a result and a cancellation notice.
"""
import asyncio
import functools
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from routecam.analysis.client import AnalysisClient
from routecam.constants import (
    DEFAULT_ROUTE_COLOR,
    MSG_ANALYSIS_CANCELLED,
    MSG_ANALYSIS_FAILED,
    MSG_ANALYSIS_TIMEOUT,
    MSG_CAPTURE_FAILED,
    MSG_CYCLE_DONE,
    MSG_CYCLE_FAILED,
    MSG_IMAGE_FAILED,
)
from routecam.errors import (
    CaptureBusyError,
    CaptureError,
    DecodeError,
    EmptyPayloadError,
    InvalidDimensionsError,
    RemoteCallError,
)
from routecam.imaging.normalizer import ImageNormalizer
from routecam.ports import CaptureSource, ResultSink
from routecam.prompt import build_messages

logger = logging.getLogger(__name__)


class CycleState(str, Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    NORMALIZING = "normalizing"
    REQUESTING = "requesting"
    DISPLAYING = "displaying"
    FAILED = "failed"


@dataclass(frozen=True)
class CycleOutcome:
    text: str
    ok: bool


class CaptureCycle:

    def __init__(
        self,
        normalizer: ImageNormalizer,
        analysis_client: AnalysisClient,
        route_color: str = DEFAULT_ROUTE_COLOR,
        request_timeout: Optional[float] = None,
    ) -> None:
        self._normalizer = normalizer
        self._client = analysis_client
        self._route_color = route_color
        self._timeout = request_timeout
        self._state = CycleState.IDLE
        self._task: Optional[asyncio.Task] = None
        self._notices: set[asyncio.Task] = set()

    @property
    def state(self) -> CycleState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state is not CycleState.IDLE

    def start(
        self,
        source: CaptureSource,
        sink: ResultSink,
        route_color: Optional[str] = None,
    ) -> asyncio.Task:
        """Begin a cycle in the background and return its cancellable task.

        Must be called from a running event loop. Raises CaptureBusyError if a
        cycle is already in flight.
        """
        self._claim()
        self._task = asyncio.create_task(self._cycle(source, sink, route_color))
        self._task.add_done_callback(functools.partial(self._release, sink))
        return self._task

    async def run(
        self,
        source: CaptureSource,
        sink: ResultSink,
        route_color: Optional[str] = None,
    ) -> CycleOutcome:
        self._claim()
        return await self._cycle(source, sink, route_color)

    def cancel(self) -> bool:
        """Abort the cycle started with start().

        Returns False if none is running or its outcome is already being shown.
        """
        match self._task:
            case None:
                return False
            case task if task.done() or self._handed_off:
                return False
            case task:
                task.cancel()
                return True

    @property
    def _handed_off(self) -> bool:
        return self._state in (CycleState.DISPLAYING, CycleState.FAILED)

    # ── internals ─────────────────────────────────────────────────────────────

    def _claim(self) -> None:
        match self._state:
            case CycleState.IDLE:
                self._transition(CycleState.CAPTURING)
            case state:
                raise CaptureBusyError(f"capture cycle is {state.value}")

    def _release(self, sink: ResultSink, task: asyncio.Task) -> None:
        # A task cancelled before its first step never enters _cycle.
        if self._task is not task:
            return
        self._task = None
        if self.busy:
            self._transition(CycleState.IDLE)
            notice = asyncio.get_running_loop().create_task(sink.show(MSG_ANALYSIS_CANCELLED))
            self._notices.add(notice)
            notice.add_done_callback(self._notices.discard)

    def _transition(self, state: CycleState) -> None:
        logger.debug("Capture cycle %s → %s", self._state.value, state.value)
        self._state = state

    async def _cycle(
        self,
        source: CaptureSource,
        sink: ResultSink,
        route_color: Optional[str],
    ) -> CycleOutcome:
        start = time.time()
        try:
            outcome = await self._execute(source, sink, route_color or self._route_color)
        except asyncio.CancelledError:
            handed_off = self._handed_off
            self._transition(CycleState.FAILED)
            logger.info(MSG_CYCLE_FAILED, time.time() - start, "cancelled")
            if not handed_off:
                await sink.show(MSG_ANALYSIS_CANCELLED)
            raise
        finally:
            self._transition(CycleState.IDLE)

        elapsed = time.time() - start
        match outcome.ok:
            case True:
                logger.info(MSG_CYCLE_DONE, elapsed)
            case False:
                logger.error(MSG_CYCLE_FAILED, elapsed, outcome.text)
        return outcome

    async def _execute(
        self, source: CaptureSource, sink: ResultSink, route_color: str
    ) -> CycleOutcome:
        try:
            raw = await source.capture()
        except CaptureError as exc:
            return await self._fail(sink, MSG_CAPTURE_FAILED % exc)

        self._transition(CycleState.NORMALIZING)
        try:
            image = await asyncio.to_thread(self._normalizer.normalize, raw)
            messages = build_messages(image, route_color)
        except (DecodeError, InvalidDimensionsError, EmptyPayloadError) as exc:
            return await self._fail(sink, MSG_IMAGE_FAILED % exc)
        finally:
            del raw

        self._transition(CycleState.REQUESTING)
        try:
            text = await asyncio.wait_for(self._client.analyze(messages), timeout=self._timeout)
        except asyncio.TimeoutError:
            return await self._fail(sink, MSG_ANALYSIS_TIMEOUT % f"{self._timeout:g}")
        except RemoteCallError as exc:
            return await self._fail(sink, MSG_ANALYSIS_FAILED % exc)

        self._transition(CycleState.DISPLAYING)
        await sink.show(text)
        return CycleOutcome(text=text, ok=True)

    async def _fail(self, sink: ResultSink, text: str) -> CycleOutcome:
        self._transition(CycleState.FAILED)
        await sink.show(text)
        return CycleOutcome(text=text, ok=False)
