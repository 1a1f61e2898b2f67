import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar


@dataclass(frozen=True, slots=True)
class FieldChanged:
    source: Any
    field: str
    old: Any
    new: Any


Listener = Callable[[FieldChanged], None]

_MISSING = object()


class Observable:
    """Mixin emitting a FieldChanged event whenever an observed attribute changes.

    Subclasses list the attribute names to watch in ``__observed__``. Events are
    delivered synchronously, in subscription order, after the new value is set.
    Assignments that leave the value unchanged, and the first assignment made
    while the object is being constructed, emit nothing. If a listener raises,
    the old value is restored before the error propagates.
    """

    __observed__: ClassVar[tuple[str, ...]] = ()

    def __setattr__(self, name: str, value: Any) -> None:
        if name not in self.__observed__:
            object.__setattr__(self, name, value)
            return
        old = self.__dict__.get(name, _MISSING)
        object.__setattr__(self, name, value)
        if old is _MISSING or old == value:
            return
        try:
            self._emit(name, old, value)
        except Exception:
            # A listener rejected the change.
            object.__setattr__(self, name, old)
            raise

    def _listeners(self) -> list[Listener]:
        try:
            return self.__dict__["_subscribers"]
        except KeyError:
            subscribers: list[Listener] = []
            object.__setattr__(self, "_subscribers", subscribers)
            return subscribers

    def subscribe(self, listener: Listener) -> None:
        self._listeners().append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        listeners = self._listeners()
        if listener in listeners:
            listeners.remove(listener)

    def _emit(self, name: str, old: Any, new: Any) -> None:
        event = FieldChanged(source=self, field=name, old=old, new=new)
        for listener in list(self._listeners()):
            listener(event)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return math.floor(value + 0.5)
