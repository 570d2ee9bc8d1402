"""
Diff-based reconciliation of membership sets.

Used by the "manage teams in this league" and "manage players on this team"
flows: the client edits a desired set, and saving applies only the
difference against the initial set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Hashable, Iterable, TypeVar

T = TypeVar("T", bound=Hashable)


@dataclass
class ReconciliationPlan(Generic[T]):
    to_add: list[T] = field(default_factory=list)
    to_remove: list[T] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove


def _unique(items: Iterable[T]) -> list[T]:
    seen: set[T] = set()
    ordered: list[T] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return ordered


def plan_reconciliation(initial: Iterable[T], desired: Iterable[T]) -> ReconciliationPlan[T]:
    """
    Compute ``desired - initial`` and ``initial - desired``.

    Order follows the input sequences and duplicates are dropped, so the
    plan is stable for the same inputs. Adds are meant to be applied before
    removes.
    """
    initial_list = _unique(initial)
    desired_list = _unique(desired)
    initial_set = set(initial_list)
    desired_set = set(desired_list)
    return ReconciliationPlan(
        to_add=[item for item in desired_list if item not in initial_set],
        to_remove=[item for item in initial_list if item not in desired_set],
    )
