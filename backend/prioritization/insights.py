"""
Dashboard-level aggregates: summary counts, impact/effort grouping and
Eisenhower grouping.
"""

from typing import Dict, List, Optional, Sequence

from .domain import EisenhowerQuadrant, Task
from .profiles import UserProductivityProfile
from .scoring import MetricsCalculator

# Cut-offs on the raw 1-5 scale used by the impact/cost plot
IMPACT_CUTOFF = 3.5
EFFORT_CUTOFF = 2.5

HIGH_PRIORITY_SCORE = 7


def summarize_tasks(
    tasks: Sequence[Task],
    profile: Optional[UserProductivityProfile] = None
) -> Dict:
    """
    Headline numbers for the dashboard.

    Priority averages and counts only consider tasks that are not complete.
    """
    calculator = MetricsCalculator(profile)
    incomplete = [t for t in tasks if not t.is_complete]
    completed_count = len(tasks) - len(incomplete)

    incomplete_scores = [calculator.priority_score(t) for t in incomplete]
    average_priority = (
        sum(incomplete_scores) / len(incomplete_scores) if incomplete_scores else 0.0
    )

    return {
        'total_tasks': len(tasks),
        'incomplete_tasks': len(incomplete),
        'completed_tasks': completed_count,
        'completion_rate': (completed_count / len(tasks)) * 100 if tasks else 0.0,
        'average_priority': round(average_priority, 3),
        'high_priority_tasks': sum(1 for s in incomplete_scores if s >= HIGH_PRIORITY_SCORE),
        'total_estimated_time': sum(t.estimated_time for t in incomplete),
    }


def group_by_impact_effort(tasks: Sequence[Task]) -> Dict[str, List[Task]]:
    """
    Split open tasks into the four impact/effort buckets.

    - quick_wins: high impact, low effort
    - major_projects: high impact, high effort
    - fill_ins: low impact, low effort
    - thankless_tasks: low impact, high effort
    """
    groups: Dict[str, List[Task]] = {
        'quick_wins': [],
        'major_projects': [],
        'fill_ins': [],
        'thankless_tasks': [],
    }
    for task in tasks:
        if task.is_complete:
            continue
        high_impact = task.impact >= IMPACT_CUTOFF
        low_effort = task.effort <= EFFORT_CUTOFF
        if high_impact and low_effort:
            groups['quick_wins'].append(task)
        elif high_impact:
            groups['major_projects'].append(task)
        elif low_effort:
            groups['fill_ins'].append(task)
        else:
            groups['thankless_tasks'].append(task)
    return groups


def group_by_quadrant(
    tasks: Sequence[Task],
    profile: Optional[UserProductivityProfile] = None
) -> Dict[EisenhowerQuadrant, List[Task]]:
    calculator = MetricsCalculator(profile)
    groups: Dict[EisenhowerQuadrant, List[Task]] = {q: [] for q in EisenhowerQuadrant}
    for task in tasks:
        groups[calculator.compute(task).eisenhower_quadrant].append(task)
    return groups
