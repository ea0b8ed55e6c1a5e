"""Weighted random selection among a fixed set of choices."""

from __future__ import annotations

import bisect
import random
import sys
from dataclasses import dataclass
from typing import Any, Generic, Iterable, TypeVar

T = TypeVar("T")

MAX_INT = sys.maxsize


class WeightOverflowError(ValueError):
    """The sum of the choice weights exceeds the maximum integer."""

    def __init__(self) -> None:
        super().__init__("sum of Choice Weights exceeds max int")


class NoValidChoicesError(ValueError):
    """No choice has a weight of at least one."""

    def __init__(self) -> None:
        super().__init__("zero Choices with Weight >= 1")


@dataclass(frozen=True)
class Choice(Generic[T]):
    """An item paired with its selection weight."""

    item: T
    weight: int


class Chooser(Generic[T]):
    """Picks items at random in proportion to their weights.

    Choices with a negative weight are ignored and can never be picked.
    """

    def __init__(self, choices: Iterable[Choice[T]]) -> None:
        ordered = sorted(choices, key=lambda choice: choice.weight)
        totals: list[int] = []
        running_total = 0
        for choice in ordered:
            weight = int(choice.weight)
            if weight >= 0:
                if weight >= MAX_INT or MAX_INT - running_total <= weight:
                    raise WeightOverflowError()
                running_total += weight
                totals.append(running_total)
            else:
                totals.append(0)
        if running_total < 1:
            raise NoValidChoicesError()
        self._choices = ordered
        self._totals = totals
        self._max = running_total

    @property
    def total_weight(self) -> int:
        """The sum of all usable weights."""
        return self._max

    def pick(self, rng: Any = None) -> T:
        """Return one item, chosen with probability proportional to its weight."""
        source = rng if rng is not None else random
        r = source.randrange(self._max) + 1
        return self._choices[bisect.bisect_left(self._totals, r)].item