"""
Scheduling-weight algorithms.

Each algorithm turns a task's ratings and the user's weights into a single
scheduling weight used to rank the recommended work order. The three
algorithms are exposed both as plain functions and as strategy objects so
the metrics calculator can dispatch once per calculation.

Formulas (hours = max(estimated_time / 60, 0.1)):
-------------------------------------------------
weighted:
    (importance*w.importance) * (impact*w.impact) / max(w.energy_required, 0.1)
    / (max(effort*w.effort, 0.1) * hours)

matrixHybrid:
    importance*w.importance * urgency*w.urgency
    + impact*w.impact / max(effort*w.effort, 0.1)
    + impact*w.impact / hours
    + w.momentum * 0.5

oodaOptimized:
    importance*w.learning_velocity + impact*w.decision_enablement
    + importance*w.skill_growth*0.3
    + impact*w.impact / (hours * max(effort*w.effort, 0.1))
    + urgency*w.momentum*0.4
"""

from typing import Dict

from .domain import Task
from .profiles import ProductivityWeights, SchedulingAlgorithm

# Floor applied to every denominator factor (effort, hours, energy).
EPSILON = 0.1

MOMENTUM_BONUS_FACTOR = 0.5
OODA_SKILL_GROWTH_FACTOR = 0.3
OODA_MOMENTUM_FACTOR = 0.4


class UnknownAlgorithmError(ValueError):
    """Raised when a scheduling algorithm name has no registered strategy."""


def task_hours(task: Task) -> float:
    """Estimated time in hours, floored at EPSILON."""
    return max(task.estimated_time / 60, EPSILON)


def weighted_effort(task: Task, weights: ProductivityWeights) -> float:
    """Weighted effort, floored at EPSILON."""
    return max(task.effort * weights.effort, EPSILON)


def calculate_weighted_score(task: Task, weights: ProductivityWeights) -> float:
    """Reward importance x impact, penalize effort, time and energy cost."""
    value = (task.importance * weights.importance) * (task.impact * weights.impact)
    energy_factor = 1 / max(weights.energy_required, EPSILON)
    return value * energy_factor / (weighted_effort(task, weights) * task_hours(task))


def calculate_matrix_hybrid_score(task: Task, weights: ProductivityWeights) -> float:
    """Eisenhower product plus impact/effort, impact per hour and momentum."""
    eisenhower = (task.importance * weights.importance) * (task.urgency * weights.urgency)
    impact_effort = (task.impact * weights.impact) / weighted_effort(task, weights)
    impact_per_hour = (task.impact * weights.impact) / task_hours(task)
    momentum_bonus = weights.momentum * MOMENTUM_BONUS_FACTOR
    return eisenhower + impact_effort + impact_per_hour + momentum_bonus


def calculate_ooda_score(task: Task, weights: ProductivityWeights) -> float:
    """Learning cycle value plus time-to-value plus urgency momentum."""
    learning_cycle = (
        task.importance * weights.learning_velocity
        + task.impact * weights.decision_enablement
        + task.importance * weights.skill_growth * OODA_SKILL_GROWTH_FACTOR
    )
    time_to_value = (task.impact * weights.impact) / (
        task_hours(task) * weighted_effort(task, weights)
    )
    momentum = task.urgency * weights.momentum * OODA_MOMENTUM_FACTOR
    return learning_cycle + time_to_value + momentum


# ==================== Strategy Interface ====================

class SchedulingStrategy:
    """Base class for scheduling-weight strategies."""

    algorithm: SchedulingAlgorithm

    def score(self, task: Task, weights: ProductivityWeights) -> float:
        raise NotImplementedError


class WeightedStrategy(SchedulingStrategy):
    algorithm = SchedulingAlgorithm.WEIGHTED

    def score(self, task: Task, weights: ProductivityWeights) -> float:
        return calculate_weighted_score(task, weights)


class MatrixHybridStrategy(SchedulingStrategy):
    algorithm = SchedulingAlgorithm.MATRIX_HYBRID

    def score(self, task: Task, weights: ProductivityWeights) -> float:
        return calculate_matrix_hybrid_score(task, weights)


class OODAStrategy(SchedulingStrategy):
    algorithm = SchedulingAlgorithm.OODA_OPTIMIZED

    def score(self, task: Task, weights: ProductivityWeights) -> float:
        return calculate_ooda_score(task, weights)


STRATEGIES: Dict[SchedulingAlgorithm, SchedulingStrategy] = {
    strategy.algorithm: strategy
    for strategy in (WeightedStrategy(), MatrixHybridStrategy(), OODAStrategy())
}


def get_strategy(algorithm) -> SchedulingStrategy:
    """
    Look up the strategy for an algorithm enum member or its string value.

    Raises:
        UnknownAlgorithmError: for names that are not registered.
    """
    if not isinstance(algorithm, SchedulingAlgorithm):
        try:
            algorithm = SchedulingAlgorithm(algorithm)
        except ValueError:
            raise UnknownAlgorithmError(
                f"Unknown scheduling algorithm: {algorithm}. "
                f"Valid options: {[a.value for a in SchedulingAlgorithm]}"
            ) from None
    return STRATEGIES[algorithm]
