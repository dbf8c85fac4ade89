"""
Confirmation step for add/update requests.

The catalogue has no real server. Instead every add or update waits on a
``ConfirmationGateway`` which answers ``Confirmed(payload)`` or
``Rejected(error)``. Only a confirmed mutation is applied to the store.

* ``SimulatedConfirmationGateway`` mimics a flaky backend: it sleeps for
  a fixed delay and then rejects a fraction of the calls at random.
* ``StaticConfirmationGateway`` always gives the same answer, which is
  what tests (and the ``always``/``never`` gateway modes) use.

Rejection is an ordinary outcome. It is returned, never raised.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from typing_extensions import Protocol

from .config import Settings
from .errors import RejectedMutationError


logger = logging.getLogger(__name__)

T = TypeVar("T")

SERVER_ERROR = "Server Error: Failed to process request."


@dataclass(frozen=True)
class Confirmed(Generic[T]):
    payload: T


@dataclass(frozen=True)
class Rejected:
    error: RejectedMutationError

    @property
    def reason(self) -> str:
        return self.error.reason


Outcome = Union[Confirmed[T], Rejected]


class ConfirmationGateway(Protocol):
    async def confirm_mutation(self, payload: T) -> Outcome[T]:
        ...


class SimulatedConfirmationGateway:
    """Answers after ``delay`` seconds, rejecting with ``rejection_rate``."""

    def __init__(
        self,
        delay: float = 1.0,
        rejection_rate: float = 0.2,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not 0.0 <= rejection_rate <= 1.0:
            raise ValueError("rejection_rate must be between 0 and 1")
        self.delay = max(0.0, delay)
        self.rejection_rate = rejection_rate
        self._rng = rng or random.Random()

    async def confirm_mutation(self, payload: T) -> Outcome[T]:
        await asyncio.sleep(self.delay)
        if self._rng.random() < self.rejection_rate:
            logger.warning("Simulated server rejected %s", type(payload).__name__)
            return Rejected(RejectedMutationError(SERVER_ERROR))
        logger.debug("Simulated server confirmed %s", type(payload).__name__)
        return Confirmed(payload)


class StaticConfirmationGateway:
    def __init__(self, confirm: bool = True, reason: str = SERVER_ERROR) -> None:
        self.confirm = confirm
        self.reason = reason
        self.calls = 0

    async def confirm_mutation(self, payload: T) -> Outcome[T]:
        self.calls += 1
        # Yield once so pending confirmations interleave like real ones.
        await asyncio.sleep(0)
        if self.confirm:
            return Confirmed(payload)
        return Rejected(RejectedMutationError(self.reason))


def gateway_from_settings(cfg: Settings) -> ConfirmationGateway:
    if cfg.gateway_mode == "always":
        return StaticConfirmationGateway(confirm=True)
    if cfg.gateway_mode == "never":
        return StaticConfirmationGateway(confirm=False)
    rng = random.Random(cfg.random_seed) if cfg.random_seed is not None else None
    return SimulatedConfirmationGateway(
        delay=cfg.confirm_delay_seconds,
        rejection_rate=cfg.rejection_rate,
        rng=rng,
    )
