from collections.abc import Iterable
from typing import Protocol, runtime_checkable


@runtime_checkable
class Discharges(Protocol):
    name: str
    discharge: int


@runtime_checkable
class Consumes(Protocol):
    def consume(self, upstream: Iterable[Discharges]) -> None: ...
