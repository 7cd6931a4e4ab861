"""Card and Suit as the engine sends them: {"rank": 1..13, "suit": "Spade"}."""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class Suit(Enum):
    def __new__(cls, wire_name: str, symbol: str, color: str):
        obj = object.__new__(cls)
        obj._value_ = wire_name
        obj.symbol = symbol
        obj.color = color
        return obj

    SPADE   = ("Spade",   "♠", "black")
    CLUB    = ("Club",    "♣", "black")
    DIAMOND = ("Diamond", "♦", "red")
    HEART   = ("Heart",   "♥", "red")

    def __str__(self) -> str:
        return self.symbol


# rank 1 is the ace
_RANK_SYMBOLS = {1: "A", 11: "J", 12: "Q", 13: "K"}


def rank_symbol(rank: int) -> str:
    return _RANK_SYMBOLS.get(rank, str(rank))


@dataclass(frozen=True)
class Card:
    rank: int
    suit: Optional[Suit]   # None: face down / unknown

    @property
    def face_down(self) -> bool:
        return self.suit is None

    @classmethod
    def from_wire(cls, raw: Any) -> "Card":
        """Unknown suits (the engine's {"rank": -1, "suit": ""}) become a card back."""
        raw = raw or {}
        try:
            suit: Optional[Suit] = Suit(raw.get("suit"))
        except ValueError:
            suit = None
        return cls(rank=int(raw.get("rank", -1)), suit=suit)

    def __str__(self) -> str:
        if self.face_down:
            return "??"
        return f"{rank_symbol(self.rank)}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self})"


FACE_DOWN = Card(rank=-1, suit=None)
