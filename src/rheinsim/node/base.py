from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import ClassVar

from rheinsim.common import Observable

from .protocols import Discharges


@dataclass(eq=False)
class BaseNode(Observable):
    """A member of the flow network: anything that releases water downstream.

    Nodes compare by identity so they can be used directly as graph nodes.
    """

    __observed__: ClassVar[tuple[str, ...]] = ("name", "discharge")

    name: str
    discharge: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("name cannot be empty")

    def consume(self, upstream: Iterable[Discharges]) -> None:
        raise NotImplementedError("Subclasses must implement consume()")
