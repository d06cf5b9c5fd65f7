"""
Score calibration for a task collection.

Raw priority scores mean little on their own: a 7 is urgent for a user whose
tasks mostly score 3 and routine for one whose tasks mostly score 10. This
module builds a per-collection snapshot (percentiles, dynamic priority
ranges, averages and benchmarks) and uses it to label individual tasks.

Percentiles:
-----------
Nearest-rank over the ascending priority scores, so p90 is the value that
only the top 10% of tasks exceed:

    p_R = scores[ceil(R/100 * N) - 1]

Ranges:
------
    critical = [p90, max(p90 * 1.5, max score)]
    high     = [p75, p90 - 0.01]
    medium   = [p25, p75 - 0.01]
    low      = [min(0, min score), p25 - 0.01]

Percentile rank of a single score interpolates linearly between the five
breakpoints. Above p90 the slope uses p90 * 2 as its width and below p10 the
score is scaled against p10 directly; this asymmetry is kept as-is so
results stay comparable with earlier releases.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .domain import EisenhowerQuadrant, Task, TaskStatus
from .profiles import UserProductivityProfile
from .scoring import MetricsCalculator

logger = logging.getLogger(__name__)

DEFAULT_MAX_TASKS_PER_DAY = 6
RANGE_GAP = 0.01
CRITICAL_HEADROOM = 1.5

LEVEL_HINTS = {
    "critical": "Immediate attention required",
    "high": "Schedule this week",
    "medium": "Plan for upcoming weeks",
    "low": "Consider delegating or eliminating",
}


@dataclass(frozen=True)
class ScoreRange:
    """Closed numeric interval [lower, upper] for one priority level."""
    lower: float
    upper: float

    def contains(self, score: float) -> bool:
        return self.lower <= score <= self.upper

    @property
    def is_empty(self) -> bool:
        return self.upper < self.lower

    def to_list(self) -> List[float]:
        return [round(self.lower, 3), round(self.upper, 3)]


@dataclass(frozen=True)
class PriorityRanges:
    critical: ScoreRange
    high: ScoreRange
    medium: ScoreRange
    low: ScoreRange

    def to_dict(self) -> Dict:
        return {
            'critical': self.critical.to_list(),
            'high': self.high.to_list(),
            'medium': self.medium.to_list(),
            'low': self.low.to_list(),
        }


@dataclass(frozen=True)
class Percentiles:
    p90: float
    p75: float
    p50: float
    p25: float
    p10: float

    def to_dict(self) -> Dict:
        return {
            'p90': self.p90,
            'p75': self.p75,
            'p50': self.p50,
            'p25': self.p25,
            'p10': self.p10,
        }


@dataclass(frozen=True)
class ScoreAverages:
    overall: float
    by_status: Dict[TaskStatus, float]
    by_quadrant: Dict[EisenhowerQuadrant, float]

    def to_dict(self) -> Dict:
        return {
            'overall': round(self.overall, 3),
            'by_status': {s.value: round(v, 3) for s, v in self.by_status.items()},
            'by_quadrant': {int(q): round(v, 3) for q, v in self.by_quadrant.items()},
        }


@dataclass(frozen=True)
class Benchmarks:
    fast_completion: float   # top quarter, typically finished quickly
    weekly_target: float     # median, weekly focus threshold
    daily_capacity: float    # sustainable daily workload score

    def to_dict(self) -> Dict:
        return {
            'fast_completion': round(self.fast_completion, 3),
            'weekly_target': round(self.weekly_target, 3),
            'daily_capacity': round(self.daily_capacity, 3),
        }


@dataclass(frozen=True)
class ScoreCalibration:
    """Statistical snapshot of one (task collection, profile) pair."""
    ranges: PriorityRanges
    percentiles: Percentiles
    averages: ScoreAverages
    benchmarks: Benchmarks

    def to_dict(self) -> Dict:
        return {
            'ranges': self.ranges.to_dict(),
            'percentiles': self.percentiles.to_dict(),
            'averages': self.averages.to_dict(),
            'benchmarks': self.benchmarks.to_dict(),
        }


@dataclass(frozen=True)
class BenchmarkComparison:
    is_fast_track: bool
    is_weekly_focus: bool
    # No per-day load check exists yet, so this is always True.
    is_daily_capacity: bool = True

    def to_dict(self) -> Dict:
        return {
            'is_fast_track': self.is_fast_track,
            'is_weekly_focus': self.is_weekly_focus,
            'is_daily_capacity': self.is_daily_capacity,
        }


@dataclass
class TaskWithCalibration:
    """A task annotated against a ScoreCalibration."""
    task: Task
    calibrated_score: float
    score_percentile: float
    priority_level: str
    score_interpretation: str
    benchmark_comparison: BenchmarkComparison

    def to_dict(self) -> Dict:
        return {
            **self.task.to_dict(),
            'calibrated_score': self.calibrated_score,
            'score_percentile': round(self.score_percentile, 2),
            'priority_level': self.priority_level,
            'score_interpretation': self.score_interpretation,
            'benchmark_comparison': self.benchmark_comparison.to_dict(),
        }


FALLBACK_CALIBRATION = ScoreCalibration(
    ranges=PriorityRanges(
        critical=ScoreRange(9, 15),
        high=ScoreRange(6, 8.99),
        medium=ScoreRange(3, 5.99),
        low=ScoreRange(0, 2.99),
    ),
    percentiles=Percentiles(p90=8, p75=6, p50=4, p25=2, p10=1),
    averages=ScoreAverages(
        overall=4,
        by_status={
            TaskStatus.COMPLETE: 5,
            TaskStatus.IN_PROGRESS: 4.5,
            TaskStatus.INCOMPLETE: 3.5,
        },
        by_quadrant={
            EisenhowerQuadrant.DO_FIRST: 7,
            EisenhowerQuadrant.SCHEDULE: 5,
            EisenhowerQuadrant.DELEGATE: 3,
            EisenhowerQuadrant.ELIMINATE: 1,
        },
    ),
    benchmarks=Benchmarks(fast_completion=7, weekly_target=5, daily_capacity=20),
)


def nearest_rank_percentile(sorted_scores: Sequence[float], rank: int) -> float:
    """
    Nearest-rank percentile of ascending `sorted_scores`.

    Uses integer arithmetic for the ceiling so ranks like 90 of 20 items do
    not drift to the next index on float error.
    """
    n = len(sorted_scores)
    index = -(-rank * n // 100) - 1
    return sorted_scores[max(0, index)]


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def compute_calibration(
    tasks: Sequence[Task],
    profile: Optional[UserProductivityProfile] = None
) -> ScoreCalibration:
    """
    Build a ScoreCalibration for a task collection.

    An empty collection yields FALLBACK_CALIBRATION so calibration is
    always defined.
    """
    if not tasks:
        logger.debug("No tasks to calibrate, using fallback calibration")
        return FALLBACK_CALIBRATION

    calculator = MetricsCalculator(profile)
    metrics = [calculator.compute(task) for task in tasks]
    scores = [m.priority_score for m in metrics]
    ascending = sorted(scores)

    percentiles = Percentiles(
        p90=nearest_rank_percentile(ascending, 90),
        p75=nearest_rank_percentile(ascending, 75),
        p50=nearest_rank_percentile(ascending, 50),
        p25=nearest_rank_percentile(ascending, 25),
        p10=nearest_rank_percentile(ascending, 10),
    )

    overall = _mean(scores)
    by_status = {
        status: _mean([s for t, s in zip(tasks, scores) if t.status is status])
        for status in (TaskStatus.COMPLETE, TaskStatus.IN_PROGRESS, TaskStatus.INCOMPLETE)
    }
    by_quadrant = {
        quadrant: _mean([
            m.priority_score for m in metrics if m.eisenhower_quadrant == quadrant
        ])
        for quadrant in EisenhowerQuadrant
    }

    ranges = PriorityRanges(
        critical=ScoreRange(
            percentiles.p90,
            max(percentiles.p90 * CRITICAL_HEADROOM, ascending[-1])
        ),
        high=ScoreRange(percentiles.p75, percentiles.p90 - RANGE_GAP),
        medium=ScoreRange(percentiles.p25, percentiles.p75 - RANGE_GAP),
        low=ScoreRange(min(0, ascending[0]), percentiles.p25 - RANGE_GAP),
    )

    max_tasks_per_day = (
        profile.scheduling_preferences.max_tasks_per_day
        if profile is not None else DEFAULT_MAX_TASKS_PER_DAY
    )
    benchmarks = Benchmarks(
        fast_completion=percentiles.p75,
        weekly_target=percentiles.p50,
        daily_capacity=overall * max_tasks_per_day,
    )

    return ScoreCalibration(
        ranges=ranges,
        percentiles=percentiles,
        averages=ScoreAverages(overall=overall, by_status=by_status, by_quadrant=by_quadrant),
        benchmarks=benchmarks,
    )


def classify_priority_level(score: float, ranges: PriorityRanges) -> str:
    """First lower bound the score reaches, evaluated top-down."""
    if score >= ranges.critical.lower:
        return "critical"
    elif score >= ranges.high.lower:
        return "high"
    elif score >= ranges.medium.lower:
        return "medium"
    return "low"


def percentile_rank(score: float, percentiles: Percentiles) -> float:
    """
    Approximate percentile of `score` by interpolating between breakpoints.

    The open-ended segments are guarded against zero-width denominators:
    with p90 == 0 a score at p90 ranks 90 and any higher score ranks 100,
    and with p10 == 0 any lower score ranks 0.
    """
    p = percentiles
    if score >= p.p90:
        if p.p90 == 0:
            return 90.0 if score == 0 else 100.0
        return 90 + ((score - p.p90) / (p.p90 * 2)) * 10
    if score >= p.p75:
        return 75 + ((score - p.p75) / (p.p90 - p.p75)) * 15
    if score >= p.p50:
        return 50 + ((score - p.p50) / (p.p75 - p.p50)) * 25
    if score >= p.p25:
        return 25 + ((score - p.p25) / (p.p50 - p.p25)) * 25
    if score >= p.p10:
        return 10 + ((score - p.p10) / (p.p25 - p.p10)) * 15
    if p.p10 == 0:
        return 0.0
    return max(0.0, (score / p.p10) * 10)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def interpret_score(score: float, level: str, percentile: float) -> str:
    """One-line explanation of a calibrated score."""
    return (
        f"{level.capitalize()} priority ({score:.1f}) - Higher than "
        f"{_round_half_up(percentile)}% of tasks. {LEVEL_HINTS[level]}."
    )


def calibrate_task(
    task: Task,
    calibration: ScoreCalibration,
    profile: Optional[UserProductivityProfile] = None
) -> TaskWithCalibration:
    """Annotate a task with its level, percentile and benchmark flags."""
    score = MetricsCalculator(profile).priority_score(task)
    level = classify_priority_level(score, calibration.ranges)
    percentile = percentile_rank(score, calibration.percentiles)

    return TaskWithCalibration(
        task=task,
        calibrated_score=round(score, 1),
        score_percentile=percentile,
        priority_level=level,
        score_interpretation=interpret_score(score, level, percentile),
        benchmark_comparison=BenchmarkComparison(
            is_fast_track=score >= calibration.benchmarks.fast_completion,
            is_weekly_focus=score >= calibration.benchmarks.weekly_target,
        ),
    )


def calibrate_tasks(
    tasks: Sequence[Task],
    profile: Optional[UserProductivityProfile] = None
) -> List[TaskWithCalibration]:
    """Calibrate every task of a collection against the collection itself."""
    calibration = compute_calibration(tasks, profile)
    return [calibrate_task(task, calibration, profile) for task in tasks]
