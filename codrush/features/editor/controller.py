from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional

from codrush.common.quota import enforce_source_size
from codrush.features.judge0.exceptions import (
    NetworkError,
    PollCancelledError,
    PollTimeoutError,
    RateLimitError,
)
from codrush.features.judge0.service import Judge0Service
from .state import EditorState, FailureKind

logger = logging.getLogger(__name__)

COMPILE_SHORTCUT = frozenset({"Control", "Enter"})


class EditorController:
    """Runs the submit/poll cycle for one editor session.

    At most one poll task is live: starting a compile bumps the state epoch
    and cancels the previous task, and a task that still finishes cannot
    touch the state because its epoch is stale.
    """

    def __init__(self, state: EditorState, service: Judge0Service) -> None:
        self.state = state
        self.service = service
        self._task: Optional[asyncio.Task] = None

    @property
    def busy(self) -> bool:
        return self._task is not None and not self._task.done()

    def start_compile(self) -> Optional[int]:
        """Schedule a compile of the current code; returns its epoch.

        Must be called from a running event loop. Empty code is ignored.
        Raises QuotaError when the source is too large to submit.
        """
        code = self.state.code
        if not code:
            logger.debug("compile requested with empty code; ignored")
            return None
        enforce_source_size(code)

        previous = self._task
        epoch = self.state.begin_submission()
        if previous is not None and not previous.done():
            logger.info("Cancelling superseded poll task before epoch %d", epoch)
            previous.cancel()
        self._task = asyncio.get_running_loop().create_task(
            self._run(epoch, code, self.state.language.id),
            name=f"codrush-compile-{epoch}",
        )
        return epoch

    async def compile(self) -> Optional[int]:
        """Start a compile and wait until its task finishes or is superseded."""
        epoch = self.start_compile()
        if epoch is not None:
            await self.wait()
        return epoch

    async def wait(self) -> None:
        task = self._task
        if task is not None:
            # asyncio.wait does not raise when the task was cancelled
            await asyncio.wait({task})

    def key_pressed(self, keys: Iterable[str]) -> Optional[int]:
        if COMPILE_SHORTCUT.issubset(set(keys)):
            return self.start_compile()
        return None

    def close(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self, epoch: int, code: str, language_id: int) -> None:
        state = self.state
        try:
            token = await self.service.submit(code, language_id)
        except RateLimitError:
            logger.warning("Submission for epoch %d rejected: daily quota exceeded", epoch)
            state.submission_failed(epoch, FailureKind.rate_limit)
            return
        except NetworkError as exc:
            logger.error("Submission for epoch %d failed: %s", epoch, exc)
            state.submission_failed(epoch, FailureKind.network)
            return

        if not state.is_current(epoch):
            return

        try:
            result = await self.service.poll(token, should_continue=lambda: state.is_current(epoch))
        except PollCancelledError:
            return
        except PollTimeoutError as exc:
            logger.error("Polling for %s gave up: %s", token, exc)
            state.submission_failed(epoch, FailureKind.timeout)
            return
        except NetworkError as exc:
            logger.error("Polling for %s failed: %s", token, exc)
            state.submission_failed(epoch, FailureKind.network)
            return

        state.apply_result(epoch, result)
