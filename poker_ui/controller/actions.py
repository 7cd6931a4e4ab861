"""
Action descriptors, legality decoding and outgoing action intents.

The engine describes legal actions with its externally-tagged enum:

    "Call" | "Check" | "Fold" | {"Bet": n} | {"Raise": n}

Descriptors are decoded once at the boundary into ActionDescriptor values;
nothing downstream re-inspects the raw JSON.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Union

logger = logging.getLogger(__name__)


class ActionKind(Enum):
    CALL = "Call"
    CHECK = "Check"
    FOLD = "Fold"
    BET = "Bet"
    RAISE = "Raise"

    @property
    def carries_amount(self) -> bool:
        return self in (ActionKind.BET, ActionKind.RAISE)


_BARE_KINDS = {ActionKind.CALL, ActionKind.CHECK, ActionKind.FOLD}


@dataclass(frozen=True)
class ActionDescriptor:
    """An engine-declared legal action. `amount` is informational only."""
    kind: ActionKind
    amount: Optional[int] = None


@dataclass(frozen=True)
class Legality:
    call: bool = False
    check: bool = False
    fold: bool = False
    bet: bool = False
    raise_: bool = False

    def allows(self, kind: ActionKind) -> bool:
        return {
            ActionKind.CALL: self.call,
            ActionKind.CHECK: self.check,
            ActionKind.FOLD: self.fold,
            ActionKind.BET: self.bet,
            ActionKind.RAISE: self.raise_,
        }[kind]

    def to_dict(self) -> dict:
        return {
            "call": self.call,
            "check": self.check,
            "fold": self.fold,
            "bet": self.bet,
            "raise": self.raise_,
        }


@dataclass(frozen=True)
class ActionIntent:
    """The finalized player decision sent to the engine."""
    kind: ActionKind
    amount: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind.carries_amount and self.amount is None:
            raise ValueError(f"{self.kind.value} requires an amount")
        if not self.kind.carries_amount and self.amount is not None:
            raise ValueError(f"{self.kind.value} carries no amount")

    @classmethod
    def call(cls) -> "ActionIntent":
        return cls(ActionKind.CALL)

    @classmethod
    def check(cls) -> "ActionIntent":
        return cls(ActionKind.CHECK)

    @classmethod
    def fold(cls) -> "ActionIntent":
        return cls(ActionKind.FOLD)

    @classmethod
    def bet(cls, amount: int) -> "ActionIntent":
        return cls(ActionKind.BET, amount)

    @classmethod
    def raise_(cls, amount: int) -> "ActionIntent":
        return cls(ActionKind.RAISE, amount)

    def to_wire(self) -> Union[str, dict]:
        """Encode in the engine's JSON shape: "Call" or {"Bet": 200}."""
        if self.kind.carries_amount:
            return {self.kind.value: self.amount}
        return self.kind.value

    def __str__(self) -> str:
        if self.kind.carries_amount:
            return f"{self.kind.value}({self.amount})"
        return self.kind.value


def decode_descriptor(raw: Any) -> Optional[ActionDescriptor]:
    """
    Decode one raw descriptor. Returns None for shapes the UI does not render.

    Besides the current wire form, the legacy {"Call": n} object is accepted
    as a Call.
    """
    if isinstance(raw, str):
        for kind in _BARE_KINDS:
            if raw == kind.value:
                return ActionDescriptor(kind)
        logger.debug(f"Ignoring unknown action descriptor {raw!r}")
        return None

    if isinstance(raw, dict):
        # Bet is tested before Raise; extra fields alongside the tag are ignored
        for kind in (ActionKind.BET, ActionKind.RAISE, ActionKind.CALL):
            if kind.value in raw:
                value = raw[kind.value]
                amount = value if isinstance(value, int) and not isinstance(value, bool) else None
                return ActionDescriptor(kind, amount)

    logger.debug(f"Ignoring unknown action descriptor {raw!r}")
    return None


def decode_actions(raws: Iterable[Any]) -> Legality:
    """Fold a descriptor list into a Legality record. Pure; order-insensitive."""
    flags = {kind: False for kind in ActionKind}
    for raw in raws:
        descriptor = decode_descriptor(raw)
        if descriptor is not None:
            flags[descriptor.kind] = True
    return Legality(
        call=flags[ActionKind.CALL],
        check=flags[ActionKind.CHECK],
        fold=flags[ActionKind.FOLD],
        bet=flags[ActionKind.BET],
        raise_=flags[ActionKind.RAISE],
    )
