"""Planned step to executed interval matching.

Strategies run in order, each as a full pass over the still-unmatched steps:
1. id: the interval carries the step id (planned_step_id)
2. ordinal: the interval carries the step order index (planned_index)
3. positional: the Nth step takes the Nth interval

An interval is claimed by the first step that matches it and never pairs
twice. Steps left unmatched keep interval=None ("no data").
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from effort_engine.workouts.models import ExecutedInterval, PlannedStep


@dataclass(frozen=True)
class AdherencePair:
    """A planned step and the executed interval matched to it, if any."""

    step: PlannedStep
    interval: ExecutedInterval | None = None
    match_method: str | None = None

    @property
    def is_matched(self) -> bool:
        return self.interval is not None


class MatchStrategy(ABC):
    """One way of finding a step's executed interval."""

    name: str

    @abstractmethod
    def find(
        self,
        step: PlannedStep,
        position: int,
        executed: Sequence[ExecutedInterval],
        claimed: set[int],
    ) -> int | None:
        """Return the index in ``executed`` of the matching interval, or None."""


class IdMatch(MatchStrategy):
    name = "id"

    def find(
        self,
        step: PlannedStep,
        position: int,
        executed: Sequence[ExecutedInterval],
        claimed: set[int],
    ) -> int | None:
        for index, interval in enumerate(executed):
            if index not in claimed and interval.planned_step_id == step.id:
                return index
        return None


class OrdinalMatch(MatchStrategy):
    name = "ordinal"

    def find(
        self,
        step: PlannedStep,
        position: int,
        executed: Sequence[ExecutedInterval],
        claimed: set[int],
    ) -> int | None:
        for index, interval in enumerate(executed):
            if index not in claimed and interval.planned_index == step.order_index:
                return index
        return None


class PositionalMatch(MatchStrategy):
    """Nth step to Nth interval.

    Intervals that carry an explicit step id or index belong to that step
    and are never taken positionally.
    """

    name = "positional"

    def find(
        self,
        step: PlannedStep,
        position: int,
        executed: Sequence[ExecutedInterval],
        claimed: set[int],
    ) -> int | None:
        if position >= len(executed) or position in claimed:
            return None
        interval = executed[position]
        if interval.planned_step_id is not None or interval.planned_index is not None:
            return None
        return position


DEFAULT_STRATEGIES: tuple[MatchStrategy, ...] = (IdMatch(), OrdinalMatch(), PositionalMatch())


def match_intervals(
    steps: Sequence[PlannedStep],
    executed: Sequence[ExecutedInterval],
    strategies: Sequence[MatchStrategy] = DEFAULT_STRATEGIES,
) -> list[AdherencePair]:
    """Pair every planned step with at most one executed interval.

    Args:
        steps: Resolved planned steps in order
        executed: Executed intervals in recorded order
        strategies: Matching strategies, tried in order

    Returns:
        One AdherencePair per step, in step order
    """
    matches: dict[int, tuple[int, str]] = {}
    claimed: set[int] = set()

    for strategy in strategies:
        for position, step in enumerate(steps):
            if position in matches:
                continue
            index = strategy.find(step, position, executed, claimed)
            if index is None:
                continue
            matches[position] = (index, strategy.name)
            claimed.add(index)
            logger.debug(f"Matched {step.id} to executed interval {index} by {strategy.name}")

    pairs: list[AdherencePair] = []
    for position, step in enumerate(steps):
        if position in matches:
            index, method = matches[position]
            pairs.append(AdherencePair(step=step, interval=executed[index], match_method=method))
        else:
            pairs.append(AdherencePair(step=step))

    unmatched = len(steps) - len(matches)
    if unmatched:
        logger.info(f"{unmatched} of {len(steps)} planned steps have no executed interval")
    return pairs
