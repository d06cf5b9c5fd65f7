"""
Sorting, filtering and the recommended work order.

All orderings are stable: tasks that compare equal keep their input order.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from .domain import EisenhowerQuadrant, Task, TaskStatus
from .profiles import UserProductivityProfile
from .scoring import MetricsCalculator


class SortOption(Enum):
    PRIORITY_DESC = "priority-desc"
    PRIORITY_ASC = "priority-asc"
    SCHEDULING_WEIGHT_DESC = "scheduling-weight-desc"
    DEADLINE_ASC = "deadline-asc"
    IMPACT_DESC = "impact-desc"
    EFFORT_ASC = "effort-asc"


DEFAULT_SORT = SortOption.SCHEDULING_WEIGHT_DESC


def _deadline_key(task: Task) -> float:
    # Tasks without a deadline compare as due at +infinity
    return task.deadline.timestamp() if task.deadline else math.inf


def _sort_key(
    option: SortOption,
    calculator: MetricsCalculator
) -> Tuple[Callable[[Task], float], bool]:
    """Return (key function, reverse) for a sort option."""
    if option is SortOption.PRIORITY_DESC:
        return calculator.priority_score, True
    if option is SortOption.PRIORITY_ASC:
        return calculator.priority_score, False
    if option is SortOption.DEADLINE_ASC:
        return _deadline_key, False
    if option is SortOption.IMPACT_DESC:
        return (lambda t: t.impact), True
    if option is SortOption.EFFORT_ASC:
        return (lambda t: t.effort), False
    return calculator.scheduling_weight, True


def sort_tasks(
    tasks: Sequence[Task],
    sort_key="scheduling-weight-desc",
    profile: Optional[UserProductivityProfile] = None
) -> List[Task]:
    """
    Return a new, stably sorted list of tasks.

    Args:
        tasks: Tasks to order (left untouched)
        sort_key: A SortOption or its string value; unknown values fall back
                  to scheduling weight, descending
        profile: Optional profile used for score-based keys
    """
    if not isinstance(sort_key, SortOption):
        try:
            sort_key = SortOption(sort_key)
        except ValueError:
            sort_key = DEFAULT_SORT

    key, reverse = _sort_key(sort_key, MetricsCalculator(profile))
    return sorted(tasks, key=key, reverse=reverse)


def generate_optimal_schedule(
    tasks: Sequence[Task],
    profile: Optional[UserProductivityProfile] = None
) -> List[Task]:
    """
    Recommended work order: open tasks by scheduling weight, highest first.

    Working hours, cognitive hours, deep-work blocks, batching, energy
    management and the energy curve are not consulted here.
    """
    open_tasks = [task for task in tasks if not task.is_complete]
    return sort_tasks(open_tasks, SortOption.SCHEDULING_WEIGHT_DESC, profile)


@dataclass
class FilterOptions:
    """
    Dashboard filters. Unset fields do not filter.

    score_range and time_range are inclusive (low, high) bounds on the
    priority score and on estimated minutes.
    """
    status: str = "all"
    category: Optional[str] = None
    score_range: Optional[Tuple[float, float]] = None
    time_range: Optional[Tuple[float, float]] = None
    quadrant: Optional[int] = None
    search: str = ""

    def __post_init__(self) -> None:
        if self.status != "all":
            self.status = TaskStatus(self.status).value


def _matches_search(task: Task, query: str) -> bool:
    query = query.lower()
    return (
        query in task.title.lower()
        or query in (task.description or "").lower()
        or query in task.category.lower()
    )


def filter_tasks(
    tasks: Sequence[Task],
    options: FilterOptions,
    profile: Optional[UserProductivityProfile] = None
) -> List[Task]:
    """Keep the tasks that satisfy every set filter, in input order."""
    calculator = MetricsCalculator(profile)
    result = []

    for task in tasks:
        if options.search and not _matches_search(task, options.search):
            continue
        if options.status != "all" and task.status.value != options.status:
            continue
        if options.category and task.category != options.category:
            continue
        if options.time_range is not None:
            low, high = options.time_range
            if not low <= task.estimated_time <= high:
                continue
        if options.score_range is not None:
            low, high = options.score_range
            if not low <= calculator.priority_score(task) <= high:
                continue
        if options.quadrant is not None:
            metrics = calculator.compute(task)
            if metrics.eisenhower_quadrant != EisenhowerQuadrant(options.quadrant):
                continue
        result.append(task)

    return result
