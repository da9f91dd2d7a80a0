"""In-memory card store: the wall's cards, oldest first."""

import itertools
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Optional

from heartwall.layout import Placement


@dataclass
class CardState:
    slot_index: int
    left: float
    top: float
    width: float
    height: float
    message: str
    color_index: int
    jitter_x: float = 0.0
    scale: float = 1.0
    born_ms: float = 0.0
    maximized: bool = False
    closing: bool = False
    extra: dict = field(default_factory=dict)


class CardStore:
    """Holds card state keyed by integer handle, in creation order.

    `card_size` is what a freshly created card measures as; it stands in for
    the rendered size of a real card element.
    """

    def __init__(self, card_size: tuple[float, float] = (220, 140), initial_scale: float = 1.0,
                 now: Callable[[], float] = lambda: 0.0):
        self.card_size = card_size
        self.initial_scale = initial_scale
        self._cards: "OrderedDict[int, CardState]" = OrderedDict()
        self._ids = itertools.count(1)
        self.now = now

    def __len__(self) -> int:
        return len(self._cards)

    def __contains__(self, handle: int) -> bool:
        return handle in self._cards

    def get_active_count(self) -> int:
        return sum(1 for c in self._cards.values() if not c.closing)

    def create_card(self, slot_index: int, placement: Placement, message: str,
                    color_index: int) -> int:
        handle = next(self._ids)
        width, height = self.card_size
        self._cards[handle] = CardState(
            slot_index=slot_index,
            left=placement.left,
            top=placement.top,
            width=width,
            height=height,
            message=message,
            color_index=color_index,
            jitter_x=placement.jitter_x,
            scale=self.initial_scale,
            born_ms=self.now(),
        )
        return handle

    def remove(self, handle: int) -> None:
        self._cards.pop(handle, None)

    def remove_oldest(self) -> Optional[int]:
        if not self._cards:
            return None
        handle, _ = self._cards.popitem(last=False)
        return handle

    def get_state(self, handle: int) -> CardState:
        return self._cards[handle]

    def set_state(self, handle: int, **partial) -> None:
        state = self._cards[handle]
        for key, value in partial.items():
            if hasattr(state, key) and key != "extra":
                setattr(state, key, value)
            else:
                state.extra[key] = value

    def handles(self) -> list[int]:
        return list(self._cards)

    def sizes(self) -> list[tuple[float, float]]:
        return [(c.width, c.height) for c in self._cards.values()]

    def boxes(self) -> list[tuple[float, float, float, float]]:
        """(left, top, width, height) of every card still on the wall."""
        return [(c.left, c.top, c.width, c.height)
                for c in self._cards.values() if not c.closing]

    def resize_cards(self, width: float, height: float) -> None:
        self.card_size = (width, height)
        for card in self._cards.values():
            if not card.maximized:
                card.width = width
                card.height = height

    def close_card(self, handle: int) -> None:
        """Mark a card as closing; `sweep()` drops it."""
        if handle in self._cards:
            self._cards[handle].closing = True

    def sweep(self) -> list[int]:
        gone = [h for h, c in self._cards.items() if c.closing]
        for handle in gone:
            del self._cards[handle]
        return gone

    def toggle_maximize(self, handle: int) -> bool:
        state = self._cards[handle]
        if state.closing:
            return state.maximized
        state.maximized = not state.maximized
        return state.maximized
