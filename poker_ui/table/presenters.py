"""Plain-data views for cards, players and the community/pot area."""
from __future__ import annotations
from typing import List, Union

from poker_ui.core.card import Card, rank_symbol
from poker_ui.models.snapshot import CardModel, GameSnapshot, PlayerModel


def card_view(card: Union[Card, CardModel]) -> dict:
    if isinstance(card, CardModel):
        card = Card.from_wire(card.model_dump())
    if card.face_down:
        return {"rank": None, "suit": None, "symbol": None, "color": None, "face_down": True}
    return {
        "rank": rank_symbol(card.rank),
        "suit": card.suit.value,
        "symbol": card.suit.symbol,
        "color": card.suit.color,
        "face_down": False,
    }


def player_view(player: PlayerModel) -> dict:
    return {
        "name": player.name,
        "bet_size": player.bet_size,
        "stack": player.stack,
        "bet_label": f"Bet: {player.bet_size}",
        "stack_label": f"Stack: {player.stack}",
        "hole": [card_view(c) for c in player.hole],
    }


def community_view(snapshot: GameSnapshot) -> dict:
    """Pot as collected so far, plus the total including live bets when it differs."""
    pot = snapshot.pot_size
    total = pot + snapshot.bets_total
    label = f"POT SIZE: {pot}"
    if total != pot:
        label += f" (TOTAL: {total})"
    return {
        "cards": [card_view(c) for c in snapshot.community],
        "pot": pot,
        "total": total,
        "label": label,
    }


def seat_order(snapshot: GameSnapshot, hero_index: int = 0) -> List[dict]:
    """Players top to bottom: opponents first, the hero last (nearest the actions)."""
    players = snapshot.players
    if not players:
        return []
    hero_index = hero_index % len(players)
    others = [p for i, p in enumerate(players) if i != hero_index]
    return [player_view(p) for p in reversed(others)] + [player_view(players[hero_index])]
