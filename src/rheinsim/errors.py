class StructuralError(Exception):
    """Raised when the flow network itself is invalid. Fatal for the run."""

    pass


class CycleError(StructuralError):
    def __init__(self, placed: int, total: int):
        self.placed = placed
        self.total = total
        super().__init__(f"Flow network contains a cycle: ordered {placed} of {total} nodes")


class TopologyError(StructuralError):
    pass


class MultipleOutflowError(TopologyError):
    """Raised when a flow node drains into more than one downstream node."""

    def __init__(self, node_name: str, successors: list[str]):
        self.node_name = node_name
        self.successors = successors
        super().__init__(f"Node '{node_name}' has more than one outflow: {', '.join(successors)}")


class MultipleOwnerError(TopologyError):
    """Raised when a segment would be owned by more than one steward."""

    def __init__(self, segment_name: str, owners: list[str]):
        self.segment_name = segment_name
        self.owners = owners
        super().__init__(f"Segment '{segment_name}' has more than one steward: {', '.join(owners)}")


class EconomicError(Exception):
    """Raised when a single investment attempt cannot go ahead. Local to that attempt."""

    pass


class InsufficientFundsError(EconomicError):
    def __init__(self, steward_name: str, balance: int, amount: int):
        self.steward_name = steward_name
        self.balance = balance
        self.amount = amount
        super().__init__(f"Steward '{steward_name}' cannot pay {amount} with a balance of {balance}")


class CapacityExceededError(EconomicError):
    def __init__(self, segment_name: str, requested: int, maximum: int):
        self.segment_name = segment_name
        self.requested = requested
        self.maximum = maximum
        super().__init__(
            f"Segment '{segment_name}': dike capacity {requested} would exceed maximum capacity {maximum}"
        )


class ConfigurationError(ValueError):
    pass
