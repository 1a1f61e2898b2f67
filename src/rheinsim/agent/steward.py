import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from rheinsim.common import Observable
from rheinsim.errors import ConfigurationError, EconomicError, InsufficientFundsError
from rheinsim.node import Segment

from .policy import NullPolicy, PolicyEvaluator

if TYPE_CHECKING:
    from rheinsim.protection import FloodProtection
    from rheinsim.system import FlowGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    steward: "Steward"
    segment: Segment
    action: "FloodProtection"
    error: EconomicError | None = None

    @property
    def built(self) -> bool:
        return self.error is None


@dataclass(eq=False)
class Steward(Observable):
    """An economic agent owning river segments and paying for their protection.

    Owned segments are looked up in the flow graph's ownership association,
    never stored on the steward.
    """

    __observed__: ClassVar[tuple[str, ...]] = ("name", "balance")

    name: str
    balance: int = 200000
    graph: "FlowGraph" = field(kw_only=True, repr=False)
    policy: PolicyEvaluator = field(default_factory=NullPolicy, kw_only=True, repr=False)

    def __post_init__(self) -> None:
        if self.balance < 0:
            raise ConfigurationError(f"balance cannot be negative, got {self.balance}")

    @property
    def segments(self) -> list[Segment]:
        return self.graph.segments_of(self)

    def deposit_money(self, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"amount cannot be negative, got {amount}")
        self.balance += amount

    def withdraw_money(self, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"amount cannot be negative, got {amount}")
        if amount > self.balance:
            raise InsufficientFundsError(self.name, self.balance, amount)
        self.balance -= amount

    def generate_possible_actions(self) -> list["FloodProtection"]:
        """Phase one: let the policy attach candidate protections to the segments they target."""
        proposed: list[FloodProtection] = []
        for candidates in self.policy.generate(self, self.segments).values():
            for action in candidates:
                action.segment.add_possible_action(action)
                logger.debug("  >>> set possible action %s", action)
                proposed.append(action)
        return proposed

    def choose_actions(self) -> list[ActionOutcome]:
        """Phase two: execute at most one candidate per owned segment.

        A candidate that fails for economic reasons is not built; the failure is
        recorded in the returned outcomes and every other segment still gets its
        turn. Candidate lists are cleared either way.
        """
        outcomes: list[ActionOutcome] = []
        for segment in self.segments:
            if not segment.possible_actions:
                continue
            try:
                chosen = self.policy.select(segment, list(segment.possible_actions))
                if chosen is None:
                    continue
                try:
                    chosen.execute()
                except EconomicError as e:
                    logger.warning("  >>> could not construct %s: %s", chosen, e)
                    outcomes.append(ActionOutcome(steward=self, segment=segment, action=chosen, error=e))
                else:
                    logger.info("  >>> constructed %s", chosen)
                    outcomes.append(ActionOutcome(steward=self, segment=segment, action=chosen))
            finally:
                segment.clear_possible_actions()
        return outcomes

    def __str__(self) -> str:
        return f"Steward[name={self.name}, balance={self.balance}]"
