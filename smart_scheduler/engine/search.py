from __future__ import annotations
from enum import Enum
import logging
import random

from smart_scheduler.schemas import ScheduleConfig
from smart_scheduler.engine.allocator import AllocationResult, GreedyAllocator


logger = logging.getLogger(__name__)


class Strategy(str, Enum):
    GREEDY = "greedy"
    BEST_OF = "best_of"


def placed_sessions(result: AllocationResult) -> int:
    return result.placed_sessions


def run_strategy(
    config: ScheduleConfig,
    strategy: Strategy = Strategy.GREEDY,
    rng: random.Random | None = None,
    attempts: int = 1,
) -> AllocationResult:
    """Run the allocator under the chosen strategy.

    ``best_of`` repeats the greedy pass with independent generators drawn
    from ``rng`` and keeps the run that placed the most sessions, the
    earliest one on ties. Each run is a complete, valid schedule on its own.
    """
    rng = rng or random.Random()
    strategy = Strategy(strategy)
    if strategy is Strategy.GREEDY:
        return GreedyAllocator(rng).run(config)

    if attempts < 1:
        raise ValueError("attempts must be at least 1")
    best: AllocationResult | None = None
    for attempt in range(attempts):
        child = random.Random(rng.getrandbits(64))
        result = GreedyAllocator(child).run(config)
        score = placed_sessions(result)
        logger.debug("best_of attempt %d placed %d sessions", attempt + 1, score)
        if best is None or score > placed_sessions(best):
            best = result
        if best.ledger.remaining_sessions == 0:
            break
    return best
