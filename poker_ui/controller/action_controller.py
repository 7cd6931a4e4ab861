"""
ActionController — turns engine legality plus player input into ActionIntents.

The controller owns the amount-input machine and is the only place the mode
is read or changed. Every finalized decision goes through the sink passed at
construction (the engine boundary), at most one intent per operation.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional

from poker_ui.controller.actions import ActionIntent, ActionKind, Legality, decode_actions
from poker_ui.controller.amount_input import AmountInput, AmountMode, AmountRange
from poker_ui.controller.errors import IllegalActionError, IllegalTransitionError

logger = logging.getLogger(__name__)

ESCAPE_KEY = "Escape"


@dataclass(frozen=True)
class ButtonView:
    control: str       # event name sent back by the client: "call", "bet", ...
    label: str
    enabled: bool
    style: str = "green"

    def to_dict(self) -> dict:
        return {
            "control": self.control,
            "label": self.label,
            "enabled": self.enabled,
            "style": self.style,
        }


@dataclass(frozen=True)
class SliderView:
    label: str
    value: int
    min: int
    max: int

    def to_dict(self) -> dict:
        return {"label": self.label, "value": self.value, "min": self.min, "max": self.max}


@dataclass(frozen=True)
class ActionPanel:
    """What the action area shows: either the button row or the amount entry."""
    mode: AmountMode
    buttons: List[ButtonView] = field(default_factory=list)
    slider: Optional[SliderView] = None

    def button(self, control: str) -> Optional[ButtonView]:
        for b in self.buttons:
            if b.control == control:
                return b
        return None

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "buttons": [b.to_dict() for b in self.buttons],
            "slider": self.slider.to_dict() if self.slider else None,
        }


def render_panel(
    mode: AmountMode,
    amount: Optional[int],
    legality: Legality,
    amount_range: Optional[AmountRange],
    call_amount: int,
) -> ActionPanel:
    """Pure: derive the action panel from mode, legality and range."""
    if mode.is_entering and amount_range is not None:
        text = mode.action_kind.value
        return ActionPanel(
            mode=mode,
            buttons=[
                ButtonView("commit", text, True, "green"),
                ButtonView("cancel", "Cancel", True, "white"),
            ],
            slider=SliderView(
                label=f"{text} amount: {amount}",
                value=amount,
                min=amount_range.start,
                max=amount_range.end,
            ),
        )

    call_label = "Call" if call_amount <= 0 else f"Call {call_amount}"
    suffix = ""
    if amount_range is not None and amount_range.is_fixed:
        suffix = f" {amount_range.start}"

    # bet and raise share one slot
    if legality.bet:
        sizing = ButtonView("bet", "Bet" + suffix, amount_range is not None)
    else:
        sizing = ButtonView("raise", "Raise" + suffix, legality.raise_ and amount_range is not None)

    return ActionPanel(
        mode=AmountMode.IDLE,
        buttons=[
            ButtonView("call", call_label, legality.call),
            sizing,
            ButtonView("check", "Check", legality.check),
            ButtonView("fold", "Fold", legality.fold, "red"),
        ],
    )


class ActionController:
    """
    Coordinates legality, the amount-input machine and intent emission.

    Args:
        sink: receives each finalized ActionIntent (the engine boundary)
    """

    def __init__(self, sink: Callable[[ActionIntent], None]) -> None:
        self._sink = sink
        self._input = AmountInput()
        self._legality = Legality()
        self._range: Optional[AmountRange] = None
        self._call_amount = 0

    # ------------------------------------------------------------------
    # Snapshot delivery
    # ------------------------------------------------------------------

    def apply_snapshot(
        self,
        actions: Iterable[Any],
        amount_range: Optional[AmountRange],
        call_amount: Optional[int],
    ) -> None:
        """Replace legality, range and call amount from a fresh snapshot."""
        legality = decode_actions(actions)
        range_changed = amount_range != self._range

        self._legality = legality
        self._range = amount_range
        self._call_amount = call_amount or 0

        if self._input.mode.is_entering:
            kind = self._input.mode.action_kind
            if range_changed or amount_range is None or not legality.allows(kind):
                logger.debug(f"Snapshot replaced range/legality; leaving {self._input.mode.value}")
                self._input.abort()
            else:
                self._input.set_range(amount_range)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def mode(self) -> AmountMode:
        return self._input.mode

    @property
    def amount(self) -> Optional[int]:
        return self._input.amount

    @property
    def legality(self) -> Legality:
        return self._legality

    @property
    def amount_range(self) -> Optional[AmountRange]:
        return self._range

    @property
    def call_amount(self) -> int:
        return self._call_amount

    def render(self) -> ActionPanel:
        return render_panel(
            self._input.mode,
            self._input.amount,
            self._legality,
            self._range,
            self._call_amount,
        )

    # ------------------------------------------------------------------
    # Player decisions
    # ------------------------------------------------------------------

    def choose_bet(self) -> None:
        self._choose_sized(ActionKind.BET)

    def choose_raise(self) -> None:
        self._choose_sized(ActionKind.RAISE)

    def set_amount(self, value: int) -> None:
        """Slider moved. Out-of-range values are rejected, never clamped."""
        self._input.set_amount(value)

    def commit_amount(self, value: Optional[int] = None) -> ActionIntent:
        if not self._input.mode.is_entering:
            raise IllegalActionError("No bet/raise amount is being entered")
        if value is not None:
            self._input.set_amount(value)
        return self._emit(self._input.commit())

    def cancel_amount(self) -> None:
        self._input.cancel()

    def abort(self) -> None:
        """Interrupt signal: drop any amount entry immediately."""
        if self._input.abort():
            logger.debug("Amount entry aborted")

    def handle_key(self, key: str) -> None:
        if key == ESCAPE_KEY:
            self.abort()

    def call(self) -> ActionIntent:
        return self._emit_simple(ActionKind.CALL)

    def check(self) -> ActionIntent:
        return self._emit_simple(ActionKind.CHECK)

    def fold(self) -> ActionIntent:
        return self._emit_simple(ActionKind.FOLD)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _choose_sized(self, kind: ActionKind) -> None:
        if self._input.mode.is_entering:
            raise IllegalTransitionError(
                f"Already in {self._input.mode.value}; commit or cancel first"
            )
        if not self._legality.allows(kind):
            raise IllegalActionError(f"{kind.value} is not a legal action")
        if self._range is None:
            raise IllegalActionError(f"No {kind.value.lower()} range was supplied")
        if self._range.is_fixed:
            # nothing to choose: one click commits the only amount
            self._emit(ActionIntent(kind, self._range.start))
            return
        self._input.begin(kind, self._range)

    def _emit_simple(self, kind: ActionKind) -> ActionIntent:
        if not self._legality.allows(kind):
            raise IllegalActionError(f"{kind.value} is not a legal action")
        self._input.cancel()
        return self._emit(ActionIntent(kind))

    def _emit(self, intent: ActionIntent) -> ActionIntent:
        logger.info(f"Emitting {intent}")
        self._sink(intent)
        return intent
