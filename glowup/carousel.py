"""Cyclic cursor over an ordered sequence of slides."""

from __future__ import annotations

from typing import Generic, Optional, Sequence, TypeVar

T = TypeVar("T")


class Carousel(Generic[T]):
    """Wrap-around index over ``items``; empty sequences stay at index 0."""

    def __init__(self, items: Sequence[T] = ()) -> None:
        self._items: Sequence[T] = items
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    @property
    def total(self) -> int:
        return len(self._items)

    @property
    def current(self) -> Optional[T]:
        if not self._items:
            return None
        return self._items[self._index]

    def load(self, items: Sequence[T]) -> None:
        """Replace the slides and rewind to the first one."""

        self._items = items
        self._index = 0

    def next(self) -> Optional[T]:
        if self._items:
            self._index = (self._index + 1) % len(self._items)
        return self.current

    def previous(self) -> Optional[T]:
        if self._items:
            self._index = (self._index - 1 + len(self._items)) % len(self._items)
        return self.current

    def go_to(self, index: int) -> Optional[T]:
        if self._items:
            self._index = index % len(self._items)
        return self.current
