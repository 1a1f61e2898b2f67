#!/usr/bin/env python3
"""Run the Rhine scenario and summarise dikes, retention and steward balances.

Network:
- Basel → Oberrhein (Basel) → Oberrhein (Neckar) → Oberrhein (Main) → Unterrhein
  → Unterrhein (Lahn/Mosel) → Unterrhein (Sieg/Ruhr/Lippe) → Rijn
- Tributary sources join along the way; three stewards own the upper, lower and Dutch stretches.
"""

import logging
import sys

from rheinsim import SimulationConfig
from rheinsim.testing import make_rhine_basin

TICKS = 100
SEED = 0

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger(__name__)


def main(ticks: int = TICKS) -> None:
    basin = make_rhine_basin(SimulationConfig(seed=SEED))
    trace = basin.simulate(ticks)

    frame = trace.to_frame()
    summary = frame.groupby("segment").agg(
        overflow_ticks=("overflow", lambda s: int((s > 0).sum())),
        threatened_ticks=("threatened", "sum"),
        final_dike=("dike_capacity", "last"),
        final_retainable=("retainable", "last"),
    )
    log.info("Segment summary after %d ticks:\n%s", ticks, summary.to_string())

    actions = trace.actions_frame()
    if not actions.empty:
        built = actions[actions["built"]]
        log.info("Built %d of %d attempted protections", len(built), len(actions))
        log.info("Spending per steward:\n%s", built.groupby("steward")["cost"].sum().to_string())

    for steward in basin.stewards:
        log.info("%s", steward)


if __name__ == "__main__":
    main(int(sys.argv[1]) if len(sys.argv) > 1 else TICKS)
