"""Pydantic view of the engine's game snapshot.

Only the fields the table renders are typed; everything else the engine puts
in a snapshot (deck, blinds, turn index...) is kept as extra data so the
snapshot can be handed back to the engine unchanged.
"""
from __future__ import annotations
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class CardModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    rank: int = -1
    suit: str = ""


class PlayerModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    hole: List[CardModel] = Field(default_factory=lambda: [CardModel(), CardModel()])
    bet_size: int = Field(default=0, ge=0)
    stack: int = Field(default=0, ge=0)


class GameSnapshot(BaseModel):
    model_config = ConfigDict(extra="allow")

    players: List[PlayerModel] = Field(default_factory=lambda: [PlayerModel(), PlayerModel()])
    community: List[CardModel] = Field(default_factory=list)
    pot_size: int = Field(default=0, ge=0)

    @classmethod
    def from_wire(cls, raw: Dict[str, Any]) -> "GameSnapshot":
        return cls.model_validate(raw)

    @property
    def bets_total(self) -> int:
        return sum(p.bet_size for p in self.players)
