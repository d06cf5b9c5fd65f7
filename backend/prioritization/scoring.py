"""
Metrics calculator for task prioritization.

Maps a task (and optionally a productivity profile) to its derived metrics:
priority score, scheduling weight, Eisenhower quadrant and impact/effort
ratio. Everything here is a pure function of its inputs.

Priority Score:
--------------
Two formulas are kept side by side so both remain reproducible:

simple (no profile supplied):
    importance + urgency + impact - effort

personalized (profile supplied):
    importance*w.importance + urgency*w.urgency + impact*w.impact
    - effort*w.effort
    + importance*w.learning_velocity*0.2
    + impact*w.skill_growth*0.15

The 0.2 and 0.15 coefficients are fixed constants and are not part of the
user's weights.

Eisenhower Quadrant:
-------------------
Thresholds scale with the weights (3 * w.importance, 3 * w.urgency), which
reduces to a fixed threshold of 3 for unit weights.
"""

from typing import Dict, Optional

from .algorithms import get_strategy, weighted_effort
from .domain import EisenhowerQuadrant, Task, TaskMetrics
from .profiles import (
    ProductivityWeights,
    SchedulingAlgorithm,
    UNIT_WEIGHTS,
    UserProductivityProfile,
)

LEARNING_VELOCITY_COEFFICIENT = 0.2
SKILL_GROWTH_COEFFICIENT = 0.15

# Rating at or above which a task counts as important/urgent, before weighting
QUADRANT_BASE_THRESHOLD = 3

QUADRANT_LABELS: Dict[EisenhowerQuadrant, str] = {
    EisenhowerQuadrant.DO_FIRST: "Do First",
    EisenhowerQuadrant.SCHEDULE: "Schedule",
    EisenhowerQuadrant.DELEGATE: "Delegate",
    EisenhowerQuadrant.ELIMINATE: "Eliminate",
}


def simple_priority_score(task: Task) -> float:
    """Unweighted priority score: importance + urgency + impact - effort."""
    return task.importance + task.urgency + task.impact - task.effort


def personalized_priority_score(task: Task, weights: ProductivityWeights) -> float:
    """Weighted priority score including the learning and skill-growth terms."""
    return (
        task.importance * weights.importance
        + task.urgency * weights.urgency
        + task.impact * weights.impact
        - task.effort * weights.effort
        + task.importance * weights.learning_velocity * LEARNING_VELOCITY_COEFFICIENT
        + task.impact * weights.skill_growth * SKILL_GROWTH_COEFFICIENT
    )


def classify_eisenhower(
    task: Task,
    weights: ProductivityWeights = UNIT_WEIGHTS
) -> EisenhowerQuadrant:
    """
    Classify a task into an Eisenhower Matrix quadrant.

    Quadrants:
    - DO_FIRST: Urgent + Important
    - SCHEDULE: Important, not urgent
    - DELEGATE: Urgent, not important
    - ELIMINATE: Neither
    """
    is_important = task.importance >= QUADRANT_BASE_THRESHOLD * weights.importance
    is_urgent = task.urgency >= QUADRANT_BASE_THRESHOLD * weights.urgency

    if is_urgent and is_important:
        return EisenhowerQuadrant.DO_FIRST
    elif not is_urgent and is_important:
        return EisenhowerQuadrant.SCHEDULE
    elif is_urgent and not is_important:
        return EisenhowerQuadrant.DELEGATE
    else:
        return EisenhowerQuadrant.ELIMINATE


def impact_effort_ratio(task: Task, weights: ProductivityWeights = UNIT_WEIGHTS) -> float:
    return (task.impact * weights.impact) / weighted_effort(task, weights)


class MetricsCalculator:
    """
    Computes TaskMetrics for tasks under one (optional) profile.

    Without a profile the simple priority formula, unit weights and the
    weighted scheduling algorithm are used.
    """

    def __init__(self, profile: Optional[UserProductivityProfile] = None):
        self.profile = profile
        if profile is not None:
            self.weights = profile.scoring_weights
            self.algorithm = profile.scheduling_preferences.algorithm
        else:
            self.weights = UNIT_WEIGHTS
            self.algorithm = SchedulingAlgorithm.WEIGHTED
        self.strategy = get_strategy(self.algorithm)

    def priority_score(self, task: Task) -> float:
        if self.profile is None:
            return simple_priority_score(task)
        return personalized_priority_score(task, self.weights)

    def scheduling_weight(self, task: Task) -> float:
        return self.strategy.score(task, self.weights)

    def compute(self, task: Task) -> TaskMetrics:
        return TaskMetrics(
            priority_score=self.priority_score(task),
            scheduling_weight=self.scheduling_weight(task),
            eisenhower_quadrant=classify_eisenhower(task, self.weights),
            impact_effort_ratio=impact_effort_ratio(task, self.weights),
        )


def compute_metrics(
    task: Task,
    profile: Optional[UserProductivityProfile] = None
) -> TaskMetrics:
    """Compute all derived metrics for a single task."""
    return MetricsCalculator(profile).compute(task)


def quadrant_label(quadrant) -> str:
    """Human-readable name of an Eisenhower quadrant (1-4)."""
    return QUADRANT_LABELS[EisenhowerQuadrant(quadrant)]


def priority_label(score: float) -> str:
    """Coarse label for an uncalibrated priority score."""
    if score >= 10:
        return "Critical"
    if score >= 7:
        return "High"
    if score >= 4:
        return "Medium"
    if score >= 1:
        return "Low"
    return "Very Low"
