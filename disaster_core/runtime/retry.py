"""
Retry policy and the retry state machine.

A retried operation moves through PENDING -> RETRYING(attempt) ->
SUCCEEDED | FAILED. Each attempt reports a RequestOutcome and the pure
``advance`` function computes the next state, so the whole policy can be
exercised without timers. ``run_with_retry`` drives the machine with an
injectable sleep function.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, TypeVar, Union

from loguru import logger
from pydantic import BaseModel

from .errors import RetryableError, ServiceError

T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[None]]


class RetryPolicy(BaseModel):
    """Configuration for retry behavior.

    The wait before attempt N (0-indexed, N >= 1) is
    min(base_delay * exponential_base ** N, max_delay), plus up to 25%
    jitter when enabled. Attempt 0 is never delayed.

    Attributes:
        max_attempts: Maximum number of attempts (including initial).
        base_delay: Multiplier applied to the exponential term, in seconds.
        max_delay: Maximum delay in seconds (caps backoff).
        exponential_base: Base for exponential backoff calculation.
        jitter: Whether to add random jitter to delays.
        retry_on_status: HTTP status codes treated as transient.
    """

    max_attempts: int = 4
    base_delay: float = 1.0
    max_delay: float = 60.0
    exponential_base: float = 2.0
    jitter: bool = False
    retry_on_status: tuple[int, ...] = (429,)

    model_config = {"frozen": True}

    def calculate_delay(self, attempt: int) -> float:
        """Calculate the backoff for a given attempt number.

        Args:
            attempt: The attempt number (0-indexed).

        Returns:
            Delay in seconds.
        """
        delay = self.base_delay * (self.exponential_base**attempt)
        delay = min(delay, self.max_delay)

        if self.jitter:
            # Add up to 25% jitter
            delay += delay * 0.25 * random.random()

        return delay

    def delay_before(self, attempt: int) -> float:
        """Seconds to wait before issuing ``attempt``; zero for the first one."""
        if attempt <= 0:
            return 0.0
        return self.calculate_delay(attempt)

    def should_retry_status(self, status_code: int) -> bool:
        """Check if a status code should trigger a retry."""
        return status_code in self.retry_on_status


# Default policy for general use: no wait, then 2s, 4s, 8s
DEFAULT_RETRY_POLICY = RetryPolicy()


# --- Outcomes reported by a single attempt ---


@dataclass(frozen=True)
class Success(Generic[T]):
    """The attempt produced a usable value."""

    value: T


@dataclass(frozen=True)
class TransientFailure:
    """The attempt failed but a later attempt may succeed."""

    error: RetryableError


@dataclass(frozen=True)
class TerminalFailure:
    """The attempt failed and no further attempt may be made."""

    error: ServiceError


RequestOutcome = Union[Success, TransientFailure, TerminalFailure]


# --- State machine ---


class RetryPhase(str, Enum):
    PENDING = "pending"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class RetryState:
    """Snapshot of a retried operation.

    ``attempt`` is the index of the next attempt to issue while the state
    is open, and the index of the deciding attempt once it is final.
    ``error`` holds the last failure seen (the terminal one when FAILED).
    """

    phase: RetryPhase = RetryPhase.PENDING
    attempt: int = 0
    value: Any = None
    error: ServiceError | None = None

    @property
    def is_final(self) -> bool:
        return self.phase in (RetryPhase.SUCCEEDED, RetryPhase.FAILED)


def advance(state: RetryState, outcome: RequestOutcome, policy: RetryPolicy) -> RetryState:
    """Compute the state that follows ``outcome`` for the current attempt.

    Args:
        state: The current, non-final state.
        outcome: What the attempt at ``state.attempt`` reported.
        policy: Supplies the attempt budget.

    Returns:
        The next state. A transient failure on the last allowed attempt
        becomes FAILED carrying that failure.

    Raises:
        ValueError: If ``state`` is already final.
    """
    if state.is_final:
        raise ValueError(f"Cannot advance a {state.phase.value} retry state")

    if isinstance(outcome, Success):
        return RetryState(phase=RetryPhase.SUCCEEDED, attempt=state.attempt, value=outcome.value)

    if isinstance(outcome, TerminalFailure):
        return RetryState(phase=RetryPhase.FAILED, attempt=state.attempt, error=outcome.error)

    next_attempt = state.attempt + 1
    if next_attempt >= policy.max_attempts:
        return RetryState(phase=RetryPhase.FAILED, attempt=state.attempt, error=outcome.error)

    return RetryState(phase=RetryPhase.RETRYING, attempt=next_attempt, error=outcome.error)


async def run_with_retry(
    attempt_fn: Callable[[int], Awaitable[RequestOutcome]],
    policy: RetryPolicy | None = None,
    sleep: SleepFn = asyncio.sleep,
    label: str = "operation",
) -> RetryState:
    """Drive the retry state machine until it reaches a final state.

    Attempts are strictly sequential. Cancelling the calling task during
    a wait or an attempt propagates CancelledError and issues nothing more.

    Args:
        attempt_fn: Coroutine function called with the attempt index.
        policy: Retry policy to use. Defaults to DEFAULT_RETRY_POLICY.
        sleep: Awaitable sleep, injectable for tests.
        label: Name used in log lines.

    Returns:
        The final RetryState.
    """
    retry_policy = policy or DEFAULT_RETRY_POLICY
    state = RetryState()

    while not state.is_final:
        delay = retry_policy.delay_before(state.attempt)
        if delay > 0:
            reason = state.error.message_safe if state.error else "retry"
            logger.info(
                f"Retry {state.attempt}/{retry_policy.max_attempts - 1} "
                f"for {label} in {delay:.2f}s: {reason}"
            )
            await sleep(delay)

        outcome = await attempt_fn(state.attempt)
        state = advance(state, outcome, retry_policy)

    if state.phase is RetryPhase.FAILED and state.error is not None:
        logger.warning(
            f"[{state.error.debug_id}] {label} failed after "
            f"{state.attempt + 1} attempt(s): {state.error.message_safe}"
        )
    return state
