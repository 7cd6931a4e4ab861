"""
Amount input sub-state machine for bet/raise sizing.

    IDLE ──begin(BET)──▶ ENTERING_BET ──commit/cancel/abort──▶ IDLE
    IDLE ──begin(RAISE)─▶ ENTERING_RAISE ─commit/cancel/abort─▶ IDLE

There is no edge between the two entering states.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from poker_ui.controller.actions import ActionIntent, ActionKind
from poker_ui.controller.errors import AmountOutOfRangeError, IllegalTransitionError

logger = logging.getLogger(__name__)


class AmountMode(Enum):
    IDLE = "idle"
    ENTERING_BET = "entering_bet"
    ENTERING_RAISE = "entering_raise"

    @property
    def is_entering(self) -> bool:
        return self is not AmountMode.IDLE

    @property
    def action_kind(self) -> Optional[ActionKind]:
        return _MODE_TO_KIND.get(self)


_KIND_TO_MODE = {
    ActionKind.BET: AmountMode.ENTERING_BET,
    ActionKind.RAISE: AmountMode.ENTERING_RAISE,
}
_MODE_TO_KIND = {mode: kind for kind, mode in _KIND_TO_MODE.items()}


@dataclass(frozen=True)
class AmountRange:
    """Inclusive bounds for a player-chosen bet/raise amount."""
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Empty amount range: {self.start} > {self.end}")

    @property
    def is_fixed(self) -> bool:
        return self.start == self.end

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.start <= value <= self.end

    @classmethod
    def from_wire(cls, raw: Any) -> Optional["AmountRange"]:
        """Parse the engine's {"start": a, "end": b} (or null)."""
        if raw is None:
            return None
        return cls(start=int(raw["start"]), end=int(raw["end"]))

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end}


class AmountInput:
    """Holds the transient mode and amount while the player sizes a bet/raise."""

    def __init__(self) -> None:
        self._mode = AmountMode.IDLE
        self._range: Optional[AmountRange] = None
        self._amount: Optional[int] = None

    @property
    def mode(self) -> AmountMode:
        return self._mode

    @property
    def amount(self) -> Optional[int]:
        return self._amount

    @property
    def amount_range(self) -> Optional[AmountRange]:
        return self._range

    def begin(self, kind: ActionKind, amount_range: AmountRange) -> None:
        """Enter ENTERING_BET / ENTERING_RAISE with the amount at range.start."""
        if kind not in _KIND_TO_MODE:
            raise IllegalTransitionError(f"{kind.value} has no amount to enter")
        if self._mode.is_entering:
            raise IllegalTransitionError(
                f"Cannot enter {_KIND_TO_MODE[kind].value} from {self._mode.value}; "
                "commit or cancel first"
            )
        self._mode = _KIND_TO_MODE[kind]
        self._range = amount_range
        self._amount = amount_range.start

    def set_amount(self, value: int) -> None:
        if not self._mode.is_entering:
            raise IllegalTransitionError("No amount is being entered")
        if value not in self._range:
            raise AmountOutOfRangeError(
                f"{value} outside [{self._range.start}, {self._range.end}]"
            )
        self._amount = value

    def set_range(self, amount_range: AmountRange) -> None:
        """A new range mid-entry restarts the held amount at its start."""
        self._range = amount_range
        if self._mode.is_entering:
            self._amount = amount_range.start

    def commit(self) -> ActionIntent:
        """Produce Bet(amount) from ENTERING_BET, Raise(amount) from ENTERING_RAISE."""
        if not self._mode.is_entering:
            raise IllegalTransitionError("Nothing to commit")
        intent = ActionIntent(self._mode.action_kind, self._amount)
        self._reset()
        return intent

    def cancel(self) -> bool:
        """Return to IDLE without emitting. Returns False if already idle."""
        if not self._mode.is_entering:
            return False
        logger.debug(f"Amount entry cancelled in {self._mode.value}")
        self._reset()
        return True

    def abort(self) -> bool:
        """External interrupt (e.g. Escape). Same outcome as cancel."""
        return self.cancel()

    def _reset(self) -> None:
        self._mode = AmountMode.IDLE
        self._amount = None
