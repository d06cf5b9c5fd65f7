"""
Unit Tests for task prioritization.

This module covers the scoring formulas, the three scheduling algorithms,
score calibration, ordering and filtering, dashboard insights, profile
storage and the API endpoints.
"""

from unittest import mock

from django.core.cache import cache
from django.db import DatabaseError
from django.test import TestCase
from rest_framework.test import APITestCase
from rest_framework import status
import json

from .algorithms import (
    EPSILON,
    UnknownAlgorithmError,
    calculate_matrix_hybrid_score,
    calculate_ooda_score,
    calculate_weighted_score,
    get_strategy,
)
from .calibration import (
    FALLBACK_CALIBRATION,
    Percentiles,
    calibrate_tasks,
    classify_priority_level,
    compute_calibration,
    nearest_rank_percentile,
    percentile_rank,
)
from .domain import EisenhowerQuadrant, Task, TaskStatus
from .insights import group_by_impact_effort, group_by_quadrant, summarize_tasks
from .models import TaskRecord
from .ordering import FilterOptions, filter_tasks, generate_optimal_schedule, sort_tasks
from .profiles import (
    PRODUCTIVITY_PERSONALITIES,
    ProductivityWeights,
    SchedulingAlgorithm,
    UNIT_WEIGHTS,
    UserProductivityProfile,
    get_default_profile,
    get_personality_by_id,
    profile_from_personality,
)
from .scoring import (
    MetricsCalculator,
    classify_eisenhower,
    compute_metrics,
    priority_label,
    quadrant_label,
)
from .store import ProfileStore, TaskStore
from .validation import ErrorCode, validate_algorithm, validate_tasks, validate_weights


# (id, title, category, importance, urgency, impact, effort, minutes, status, deadline)
SAMPLE_ROWS = [
    ("1", "Finish quarterly report", "Work", 5, 4, 5, 3, 180, "incomplete", "2024-02-01"),
    ("2", "Refactor billing module", "Work", 4, 2, 4, 4, 240, "in-progress", None),
    ("3", "Complete statistics course", "Learning", 4, 2, 5, 2, 300, "incomplete", None),
    ("4", "Reply to client emails", "Work", 2, 5, 2, 1, 30, "incomplete", "2024-01-17"),
    ("5", "Organize garage", "Personal", 2, 2, 3, 2, 90, "incomplete", None),
    ("6", "Sketch album cover", "Creative", 3, 1, 4, 3, 120, "incomplete", None),
    ("7", "Book dentist appointment", "Health", 4, 3, 4, 1, 15, "incomplete", None),
    ("8", "Sort old photos", "Personal", 2, 1, 2, 4, 180, "incomplete", None),
    ("9", "Prepare team standup", "Work", 4, 4, 3, 2, 120, "complete", "2024-01-11"),
    ("10", "Review monthly budget", "Finance", 3, 2, 4, 3, 150, "incomplete", None),
]


def sample_payload():
    tasks = []
    for row in SAMPLE_ROWS:
        task_id, title, category, imp, urg, impact, effort, minutes, task_status, deadline = row
        data = {
            'id': task_id,
            'title': title,
            'category': category,
            'importance': imp,
            'urgency': urg,
            'impact': impact,
            'effort': effort,
            'estimated_time': minutes,
            'status': task_status,
        }
        if deadline:
            data['deadline'] = f"{deadline}T00:00:00"
        tasks.append(data)
    return tasks


def sample_tasks():
    return [Task.from_dict(data) for data in sample_payload()]


def make_task(task_id="t", importance=3, urgency=3, impact=3, effort=3, minutes=60, **kwargs):
    return Task(
        id=task_id,
        title=kwargs.pop('title', f"Task {task_id}"),
        importance=importance,
        urgency=urgency,
        impact=impact,
        effort=effort,
        estimated_time=minutes,
        **kwargs
    )


class AlgorithmTests(TestCase):
    """Tests for the three scheduling-weight algorithms."""

    def setUp(self):
        self.task = sample_tasks()[0]

    def test_weighted_score_unit_weights(self):
        """importance x impact over effort x hours."""
        score = calculate_weighted_score(self.task, UNIT_WEIGHTS)
        self.assertAlmostEqual(score, 25 / 9, places=6)

    def test_matrix_hybrid_score_unit_weights(self):
        score = calculate_matrix_hybrid_score(self.task, UNIT_WEIGHTS)
        self.assertAlmostEqual(score, 20 + 5 / 3 + 5 / 3 + 0.5, places=6)

    def test_ooda_score_unit_weights(self):
        score = calculate_ooda_score(self.task, UNIT_WEIGHTS)
        self.assertAlmostEqual(score, 11.5 + 5 / 9 + 1.6, places=6)

    def test_energy_weight_scales_weighted_score(self):
        """Doubling energy_required halves the weighted score."""
        heavy = ProductivityWeights(energy_required=2.0)
        self.assertAlmostEqual(
            calculate_weighted_score(self.task, heavy),
            calculate_weighted_score(self.task, UNIT_WEIGHTS) / 2,
            places=6
        )

    def test_zero_effort_and_time_stay_finite(self):
        """Denominators are floored at EPSILON."""
        task = make_task(importance=2, impact=3, effort=0, minutes=0)
        score = calculate_weighted_score(task, UNIT_WEIGHTS)
        self.assertAlmostEqual(score, 6 / (EPSILON * EPSILON), places=3)

    def test_zero_energy_weight_is_floored(self):
        weights = ProductivityWeights(energy_required=0)
        score = calculate_weighted_score(self.task, weights)
        self.assertAlmostEqual(score, (25 / 9) * 10, places=6)

    def test_get_strategy_accepts_string(self):
        strategy = get_strategy("matrixHybrid")
        self.assertEqual(strategy.algorithm, SchedulingAlgorithm.MATRIX_HYBRID)

    def test_get_strategy_unknown(self):
        with self.assertRaises(UnknownAlgorithmError):
            get_strategy("roundRobin")


class MetricsCalculatorTests(TestCase):
    """Tests for priority scores and derived metrics."""

    def setUp(self):
        self.task = sample_tasks()[0]

    def test_simple_score_without_profile(self):
        metrics = compute_metrics(self.task)
        self.assertEqual(metrics.priority_score, 11)

    def test_personalized_score_with_balanced_profile(self):
        """Learning and skill-growth terms apply even at unit weights."""
        metrics = compute_metrics(self.task, get_default_profile("u-1"))
        self.assertAlmostEqual(metrics.priority_score, 12.75, places=6)

    def test_no_profile_uses_weighted_algorithm(self):
        metrics = compute_metrics(self.task)
        self.assertAlmostEqual(metrics.scheduling_weight, 25 / 9, places=6)

    def test_profile_algorithm_is_used(self):
        profile = profile_from_personality("u-1", "learner")
        calculator = MetricsCalculator(profile)
        self.assertEqual(calculator.algorithm, SchedulingAlgorithm.OODA_OPTIMIZED)
        self.assertAlmostEqual(
            calculator.scheduling_weight(self.task),
            calculate_ooda_score(self.task, profile.scoring_weights),
            places=6
        )

    def test_impact_effort_ratio(self):
        metrics = compute_metrics(self.task)
        self.assertAlmostEqual(metrics.impact_effort_ratio, 5 / 3, places=6)

    def test_metrics_are_deterministic(self):
        profile = profile_from_personality("u-1", "deepWorker")
        self.assertEqual(compute_metrics(self.task, profile), compute_metrics(self.task, profile))

    def test_metrics_to_dict(self):
        data = compute_metrics(self.task).to_dict()
        self.assertEqual(data['eisenhower_quadrant'], 1)
        self.assertEqual(data['priority_score'], 11)

    def test_priority_labels(self):
        self.assertEqual(priority_label(11), "Critical")
        self.assertEqual(priority_label(7), "High")
        self.assertEqual(priority_label(4.5), "Medium")
        self.assertEqual(priority_label(1), "Low")
        self.assertEqual(priority_label(-2), "Very Low")


class EisenhowerTests(TestCase):
    """Tests for quadrant classification."""

    def test_quadrants_at_unit_weights(self):
        self.assertEqual(classify_eisenhower(make_task(importance=3, urgency=3)), EisenhowerQuadrant.DO_FIRST)
        self.assertEqual(classify_eisenhower(make_task(importance=3, urgency=2)), EisenhowerQuadrant.SCHEDULE)
        self.assertEqual(classify_eisenhower(make_task(importance=2, urgency=3)), EisenhowerQuadrant.DELEGATE)
        self.assertEqual(classify_eisenhower(make_task(importance=2, urgency=2)), EisenhowerQuadrant.ELIMINATE)

    def test_every_task_gets_exactly_one_quadrant(self):
        tasks = sample_tasks()
        groups = group_by_quadrant(tasks)
        self.assertEqual(sum(len(g) for g in groups.values()), len(tasks))

    def test_thresholds_scale_with_weights(self):
        """Firefighter urgency weight 3.0 moves the urgency threshold to 9."""
        profile = profile_from_personality("u-1", "firefighter")
        task = make_task(importance=5, urgency=5)
        metrics = compute_metrics(task, profile)
        self.assertEqual(metrics.eisenhower_quadrant, EisenhowerQuadrant.SCHEDULE)

    def test_quadrant_labels(self):
        self.assertEqual(quadrant_label(1), "Do First")
        self.assertEqual(quadrant_label(EisenhowerQuadrant.ELIMINATE), "Eliminate")


class CalibrationTests(TestCase):
    """Tests for percentile-based calibration of the sample collection."""

    def setUp(self):
        self.tasks = sample_tasks()
        self.calibration = compute_calibration(self.tasks)

    def test_empty_collection_uses_fallback(self):
        self.assertIs(compute_calibration([]), FALLBACK_CALIBRATION)
        self.assertEqual(FALLBACK_CALIBRATION.ranges.critical.lower, 9)
        self.assertEqual(FALLBACK_CALIBRATION.benchmarks.daily_capacity, 20)

    def test_percentiles(self):
        p = self.calibration.percentiles
        self.assertEqual((p.p10, p.p25, p.p50, p.p75, p.p90), (1, 5, 6, 9, 10))

    def test_percentiles_are_monotonic(self):
        p = self.calibration.percentiles
        self.assertTrue(p.p10 <= p.p25 <= p.p50 <= p.p75 <= p.p90)

    def test_ranges(self):
        ranges = self.calibration.ranges
        self.assertEqual(ranges.critical.lower, 10)
        self.assertEqual(ranges.critical.upper, 15)
        self.assertEqual(ranges.high.lower, 9)
        self.assertAlmostEqual(ranges.high.upper, 9.99)
        self.assertEqual(ranges.medium.lower, 5)
        self.assertAlmostEqual(ranges.medium.upper, 8.99)
        self.assertEqual(ranges.low.lower, 0)
        self.assertAlmostEqual(ranges.low.upper, 4.99)

    def test_ranges_do_not_overlap(self):
        ranges = self.calibration.ranges
        self.assertGreater(ranges.critical.lower, ranges.high.upper)
        self.assertGreater(ranges.high.lower, ranges.medium.upper)
        self.assertGreater(ranges.medium.lower, ranges.low.upper)
        for name in ("critical", "high", "medium", "low"):
            self.assertFalse(getattr(ranges, name).is_empty)

    def test_tied_scores_collapse_middle_ranges(self):
        """Equal breakpoints leave the high and medium ranges empty."""
        tasks = [make_task(str(i), 3, 3, 3, 3) for i in range(4)]
        ranges = compute_calibration(tasks).ranges
        self.assertFalse(ranges.critical.is_empty)
        self.assertTrue(ranges.high.is_empty)
        self.assertTrue(ranges.medium.is_empty)
        self.assertFalse(ranges.low.is_empty)

    def test_averages(self):
        averages = self.calibration.averages
        self.assertEqual(averages.overall, 7)
        self.assertEqual(averages.by_status[TaskStatus.COMPLETE], 9)
        self.assertEqual(averages.by_status[TaskStatus.IN_PROGRESS], 6)
        self.assertAlmostEqual(averages.by_status[TaskStatus.INCOMPLETE], 6.875)
        self.assertEqual(averages.by_quadrant[EisenhowerQuadrant.DO_FIRST], 10)
        self.assertEqual(averages.by_quadrant[EisenhowerQuadrant.SCHEDULE], 6.5)
        self.assertEqual(averages.by_quadrant[EisenhowerQuadrant.DELEGATE], 8)
        self.assertEqual(averages.by_quadrant[EisenhowerQuadrant.ELIMINATE], 3)

    def test_benchmarks(self):
        benchmarks = self.calibration.benchmarks
        self.assertEqual(benchmarks.fast_completion, 9)
        self.assertEqual(benchmarks.weekly_target, 6)
        self.assertEqual(benchmarks.daily_capacity, 42)

    def test_daily_capacity_uses_profile_limit(self):
        profile = profile_from_personality("u-1", "firefighter")
        calibration = compute_calibration(self.tasks, profile)
        self.assertAlmostEqual(
            calibration.benchmarks.daily_capacity,
            calibration.averages.overall * 12
        )

    def test_calibrated_tasks(self):
        calibrated = {c.task.id: c for c in calibrate_tasks(self.tasks)}

        self.assertEqual(calibrated["1"].priority_level, "critical")
        self.assertAlmostEqual(calibrated["1"].score_percentile, 90.5)
        self.assertEqual(calibrated["7"].priority_level, "critical")
        self.assertAlmostEqual(calibrated["7"].score_percentile, 90)
        self.assertEqual(calibrated["3"].priority_level, "high")
        self.assertAlmostEqual(calibrated["3"].score_percentile, 75)

        task_4 = calibrated["4"]
        self.assertEqual(task_4.priority_level, "medium")
        self.assertAlmostEqual(task_4.score_percentile, 50 + 50 / 3)
        self.assertFalse(task_4.benchmark_comparison.is_fast_track)
        self.assertTrue(task_4.benchmark_comparison.is_weekly_focus)
        self.assertTrue(task_4.benchmark_comparison.is_daily_capacity)

    def test_interpretation(self):
        calibrated = {c.task.id: c for c in calibrate_tasks(self.tasks)}
        task_8 = calibrated["8"]
        self.assertEqual(task_8.priority_level, "low")
        self.assertAlmostEqual(task_8.score_percentile, 10)
        self.assertEqual(
            task_8.score_interpretation,
            "Low priority (1.0) - Higher than 10% of tasks. Consider delegating or eliminating."
        )

    def test_level_matches_ranges(self):
        """Every calibrated level contains its task's score."""
        ranges = self.calibration.ranges
        for item in calibrate_tasks(self.tasks):
            score = MetricsCalculator().priority_score(item.task)
            self.assertTrue(getattr(ranges, item.priority_level).contains(score))

    def test_single_task_is_critical(self):
        task = make_task(importance=4, urgency=4, impact=4, effort=2)
        calibrated = calibrate_tasks([task])
        self.assertEqual(calibrated[0].priority_level, "critical")

    def test_classify_priority_level_top_down(self):
        ranges = self.calibration.ranges
        self.assertEqual(classify_priority_level(20, ranges), "critical")
        self.assertEqual(classify_priority_level(9.5, ranges), "high")
        self.assertEqual(classify_priority_level(-3, ranges), "low")


class PercentileRankTests(TestCase):
    """Tests for percentile interpolation and its edge cases."""

    def test_nearest_rank(self):
        scores = list(range(1, 21))
        self.assertEqual(nearest_rank_percentile(scores, 90), 18)
        self.assertEqual(nearest_rank_percentile(scores, 10), 2)
        self.assertEqual(nearest_rank_percentile([7], 90), 7)

    def test_interpolates_between_breakpoints(self):
        p = Percentiles(p90=10, p75=9, p50=6, p25=5, p10=1)
        self.assertAlmostEqual(percentile_rank(3, p), 17.5)
        self.assertAlmostEqual(percentile_rank(5.5, p), 37.5)

    def test_above_p90(self):
        p = Percentiles(p90=10, p75=9, p50=6, p25=5, p10=1)
        self.assertAlmostEqual(percentile_rank(30, p), 100)

    def test_below_p10(self):
        p = Percentiles(p90=10, p75=9, p50=6, p25=5, p10=2)
        self.assertAlmostEqual(percentile_rank(1, p), 5)
        self.assertEqual(percentile_rank(-4, p), 0)

    def test_all_zero_percentiles(self):
        p = Percentiles(p90=0, p75=0, p50=0, p25=0, p10=0)
        self.assertEqual(percentile_rank(0, p), 90)
        self.assertEqual(percentile_rank(2, p), 100)

    def test_zero_p10_below(self):
        p = Percentiles(p90=5, p75=4, p50=3, p25=1, p10=0)
        self.assertEqual(percentile_rank(-2, p), 0)

    def test_identical_scores(self):
        tasks = [make_task(str(i), 3, 3, 3, 3) for i in range(4)]
        for item in calibrate_tasks(tasks):
            self.assertEqual(item.priority_level, "critical")
            self.assertAlmostEqual(item.score_percentile, 90)


class OrderingTests(TestCase):
    """Tests for sorting, scheduling and filtering."""

    def setUp(self):
        self.tasks = sample_tasks()

    def ids(self, tasks):
        return [t.id for t in tasks]

    def test_optimal_schedule(self):
        """Open tasks by weighted score, ties in input order."""
        schedule = generate_optimal_schedule(self.tasks)
        self.assertEqual(self.ids(schedule), ["7", "4", "1", "3", "5", "6", "10", "2", "8"])

    def test_schedule_excludes_complete(self):
        schedule = generate_optimal_schedule(self.tasks)
        self.assertNotIn("9", self.ids(schedule))

    def test_schedule_does_not_mutate_input(self):
        before = self.ids(self.tasks)
        generate_optimal_schedule(self.tasks)
        self.assertEqual(self.ids(self.tasks), before)

    def test_impact_desc_keeps_input_order_for_ties(self):
        ordered = sort_tasks(self.tasks, "impact-desc")
        self.assertEqual(self.ids(ordered), ["1", "3", "2", "6", "7", "10", "5", "9", "4", "8"])

    def test_deadline_sort_puts_missing_last(self):
        ordered = sort_tasks(self.tasks, "deadline-asc")
        self.assertEqual(self.ids(ordered), ["9", "4", "1", "2", "3", "5", "6", "7", "8", "10"])

    def test_priority_desc(self):
        ordered = sort_tasks(self.tasks, "priority-desc")
        self.assertEqual(self.ids(ordered)[:3], ["1", "7", "3"])

    def test_priority_asc_is_stable(self):
        ordered = sort_tasks(self.tasks, "priority-asc")
        self.assertEqual(self.ids(ordered)[:3], ["8", "5", "6"])

    def test_effort_asc(self):
        ordered = sort_tasks(self.tasks, "effort-asc")
        self.assertEqual(self.ids(ordered)[:2], ["4", "7"])

    def test_unknown_key_falls_back_to_scheduling_weight(self):
        self.assertEqual(
            self.ids(sort_tasks(self.tasks, "alphabetical")),
            self.ids(sort_tasks(self.tasks, "scheduling-weight-desc"))
        )

    def test_filter_by_category(self):
        result = filter_tasks(self.tasks, FilterOptions(category="Work"))
        self.assertEqual(self.ids(result), ["1", "2", "4", "9"])

    def test_filter_by_status(self):
        result = filter_tasks(self.tasks, FilterOptions(status="complete"))
        self.assertEqual(self.ids(result), ["9"])

    def test_filter_by_search(self):
        result = filter_tasks(self.tasks, FilterOptions(search="REPORT"))
        self.assertEqual(self.ids(result), ["1"])

    def test_filter_by_score_and_time(self):
        result = filter_tasks(self.tasks, FilterOptions(score_range=(8, 11), time_range=(0, 60)))
        self.assertEqual(self.ids(result), ["4", "7"])

    def test_filter_by_quadrant(self):
        result = filter_tasks(self.tasks, FilterOptions(quadrant=3))
        self.assertEqual(self.ids(result), ["4"])

    def test_invalid_filter_status(self):
        with self.assertRaises(ValueError):
            FilterOptions(status="archived")


class InsightsTests(TestCase):
    """Tests for dashboard aggregates."""

    def setUp(self):
        self.tasks = sample_tasks()

    def test_summary(self):
        summary = summarize_tasks(self.tasks)
        self.assertEqual(summary['total_tasks'], 10)
        self.assertEqual(summary['incomplete_tasks'], 9)
        self.assertEqual(summary['completed_tasks'], 1)
        self.assertEqual(summary['completion_rate'], 10)
        self.assertAlmostEqual(summary['average_priority'], 6.778)
        self.assertEqual(summary['high_priority_tasks'], 4)
        self.assertEqual(summary['total_estimated_time'], 1305)

    def test_empty_summary(self):
        summary = summarize_tasks([])
        self.assertEqual(summary['total_tasks'], 0)
        self.assertEqual(summary['completion_rate'], 0)

    def test_impact_effort_groups(self):
        groups = group_by_impact_effort(self.tasks)
        self.assertEqual([t.id for t in groups['quick_wins']], ["3", "7"])
        self.assertEqual([t.id for t in groups['major_projects']], ["1", "2", "6", "10"])
        self.assertEqual([t.id for t in groups['fill_ins']], ["4", "5"])
        self.assertEqual([t.id for t in groups['thankless_tasks']], ["8"])


class ProfileTests(TestCase):
    """Tests for personality templates and profile helpers."""

    def test_five_personalities(self):
        ids = [p.id for p in PRODUCTIVITY_PERSONALITIES]
        self.assertEqual(ids, ["optimizer", "deepWorker", "firefighter", "learner", "balanced"])

    def test_default_profile_is_balanced(self):
        profile = get_default_profile("u-1")
        self.assertEqual(profile.based_on_template, "balanced")
        self.assertEqual(profile.scoring_weights, ProductivityWeights())
        self.assertEqual(profile.algorithm, SchedulingAlgorithm.WEIGHTED)

    def test_profiles_do_not_share_template_state(self):
        first = profile_from_personality("a", "optimizer")
        first.scoring_weights.effort = 9
        second = profile_from_personality("b", "optimizer")
        self.assertEqual(second.scoring_weights.effort, 2.0)
        self.assertEqual(get_personality_by_id("optimizer").scoring_weights.effort, 2.0)

    def test_unknown_personality(self):
        self.assertIsNone(get_personality_by_id("procrastinator"))
        with self.assertRaises(KeyError):
            profile_from_personality("u-1", "procrastinator")

    def test_with_overrides_copies(self):
        profile = get_default_profile("u-1")
        changed = profile.with_overrides(scoring_weights=ProductivityWeights(urgency=2.0))
        self.assertEqual(changed.scoring_weights.urgency, 2.0)
        self.assertEqual(profile.scoring_weights.urgency, 1.0)

    def test_round_trip_through_dict(self):
        profile = profile_from_personality("u-1", "learner")
        self.assertEqual(UserProductivityProfile.from_dict(profile.to_dict()), profile)

    def test_from_dict_fills_missing_sections(self):
        profile = UserProductivityProfile.from_dict({
            'user_id': 'u-1',
            'scheduling_preferences': {'algorithm': 'oodaOptimized'},
        })
        self.assertEqual(profile.algorithm, SchedulingAlgorithm.OODA_OPTIMIZED)
        self.assertEqual(profile.scheduling_preferences.max_tasks_per_day, 6)
        self.assertEqual(profile.scoring_weights, ProductivityWeights())


class ValidationTests(TestCase):
    """Tests for caller-side validation."""

    def test_valid_sample(self):
        self.assertEqual(validate_tasks(sample_payload()), [])

    def test_negative_rating(self):
        errors = validate_tasks([{'title': 'x', 'importance': -1, 'urgency': 1, 'impact': 1, 'effort': 1}])
        self.assertEqual(errors[0].code, ErrorCode.ERR_INVALID_RATING)
        self.assertEqual(errors[0].field, 'importance')

    def test_ratings_above_five_are_allowed(self):
        errors = validate_tasks([{'title': 'x', 'importance': 8, 'urgency': 1, 'impact': 1, 'effort': 1}])
        self.assertEqual(errors, [])

    def test_missing_title(self):
        errors = validate_tasks([{'title': '  ', 'importance': 1, 'urgency': 1, 'impact': 1, 'effort': 1}])
        self.assertEqual(errors[0].code, ErrorCode.ERR_MISSING_FIELD)

    def test_duplicate_ids(self):
        payload = sample_payload()
        payload[1]['id'] = payload[0]['id']
        codes = [e.code for e in validate_tasks(payload)]
        self.assertIn(ErrorCode.ERR_DUPLICATE_ID, codes)

    def test_duplicate_ids_across_types(self):
        """An integer id and its string form name the same task."""
        payload = sample_payload()[:2]
        payload[0]['id'] = 1
        payload[1]['id'] = "1"
        codes = [e.code for e in validate_tasks(payload)]
        self.assertIn(ErrorCode.ERR_DUPLICATE_ID, codes)

    def test_task_must_be_object(self):
        errors = validate_tasks(["oops", sample_payload()[0]])
        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].code, ErrorCode.ERR_MISSING_FIELD)
        self.assertEqual(errors[0].task_id, "1")

    def test_invalid_status_and_time(self):
        errors = validate_tasks([{
            'title': 'x', 'importance': 1, 'urgency': 1, 'impact': 1, 'effort': 1,
            'estimated_time': -5, 'status': 'archived'
        }])
        codes = [e.code for e in errors]
        self.assertIn(ErrorCode.ERR_INVALID_TIME, codes)
        self.assertIn(ErrorCode.ERR_INVALID_STATUS, codes)

    def test_weights_must_be_positive(self):
        errors = validate_weights({'importance': 0, 'urgency': 1.5})
        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].field, 'importance')

    def test_algorithm(self):
        self.assertEqual(validate_algorithm('weighted'), [])
        self.assertEqual(validate_algorithm('random')[0].code, ErrorCode.ERR_INVALID_ALGORITHM)
        self.assertEqual(validate_algorithm(['weighted'])[0].code, ErrorCode.ERR_INVALID_ALGORITHM)


class StoreTests(TestCase):
    """Tests for the profile and task stores."""

    def setUp(self):
        self.store = ProfileStore()

    def test_load_missing_profile(self):
        self.assertIsNone(self.store.load("nobody"))

    def test_load_or_default_does_not_save(self):
        profile = self.store.load_or_default("new-user")
        self.assertEqual(profile.based_on_template, "balanced")
        self.assertIsNone(self.store.load("new-user"))

    def test_save_and_load(self):
        profile = profile_from_personality("u-1", "deepWorker")
        self.assertTrue(self.store.save("u-1", profile))
        self.assertEqual(self.store.load("u-1"), profile)

    def test_save_replaces_whole_profile(self):
        self.store.save("u-1", profile_from_personality("u-1", "deepWorker"))
        self.store.save("u-1", profile_from_personality("u-1", "learner"))
        self.assertEqual(self.store.load("u-1").based_on_template, "learner")

    def test_save_failure_returns_false(self):
        profile = get_default_profile("u-1")
        with mock.patch(
            'prioritization.store.ProductivityProfileRecord.objects.update_or_create',
            side_effect=DatabaseError("disk full")
        ):
            self.assertFalse(self.store.save("u-1", profile))

    def test_reset(self):
        self.store.save("u-1", profile_from_personality("u-1", "firefighter"))
        profile = self.store.reset("u-1")
        self.assertEqual(profile.based_on_template, "balanced")
        self.assertIsNone(self.store.load("u-1"))

    def test_list_tasks(self):
        TaskRecord.objects.create(
            user_id="u-1", title="Write tests", importance=4, urgency=3,
            impact=4, effort=2, estimated_time=60
        )
        TaskRecord.objects.create(
            user_id="u-2", title="Other user", importance=1, urgency=1,
            impact=1, effort=1
        )
        tasks = TaskStore().list_tasks("u-1")
        self.assertEqual(len(tasks), 1)
        self.assertEqual(tasks[0].title, "Write tests")
        self.assertEqual(tasks[0].status, TaskStatus.INCOMPLETE)


class APIEndpointTests(APITestCase):
    """Tests for the API endpoints."""

    def setUp(self):
        cache.clear()

    def post(self, url, data):
        return self.client.post(url, data=json.dumps(data), content_type='application/json')

    def test_metrics_endpoint_success(self):
        response = self.post('/api/tasks/metrics/', {'tasks': sample_payload()})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['count'], 10)
        first = response.data['tasks'][0]
        self.assertEqual(first['metrics']['priority_score'], 11)
        self.assertEqual(first['quadrant_label'], "Do First")
        self.assertFalse(response.data['profile']['personalized'])

    def test_metrics_with_inline_profile(self):
        response = self.post('/api/tasks/metrics/', {
            'tasks': sample_payload()[:1],
            'profile': {'scoring_weights': {'importance': 1.0}},
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['tasks'][0]['metrics']['priority_score'], 12.75)

    def test_metrics_with_stored_profile(self):
        ProfileStore().save("u-1", profile_from_personality("u-1", "learner"))
        response = self.post('/api/tasks/metrics/', {'tasks': sample_payload(), 'user_id': 'u-1'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['profile']['algorithm'], 'oodaOptimized')

    def test_invalid_rating_rejected(self):
        payload = sample_payload()
        payload[0]['impact'] = -3
        response = self.post('/api/tasks/metrics/', {'tasks': payload})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['error_code'], 'ERR_INVALID_RATING')

    def test_non_object_task_rejected(self):
        response = self.post('/api/tasks/metrics/', {'tasks': ['oops']})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error_code'], 'ERR_MISSING_FIELD')

    def test_mixed_type_duplicate_ids_rejected(self):
        payload = sample_payload()[:2]
        payload[0]['id'] = 1
        payload[1]['id'] = '1'
        response = self.post('/api/tasks/insights/', {'tasks': payload})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error_code'], 'ERR_DUPLICATE_ID')

    def test_missing_tasks_rejected(self):
        response = self.post('/api/tasks/metrics/', {})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error_code'], 'ERR_MISSING_FIELD')

    def test_calibrate_endpoint(self):
        response = self.post('/api/tasks/calibrate/', {'tasks': sample_payload()})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['calibration']['percentiles']['p90'], 10)
        self.assertEqual(response.data['summary']['critical'], 2)
        levels = {t['id']: t['priority_level'] for t in response.data['tasks']}
        self.assertEqual(levels['8'], 'low')

    def test_calibrate_empty_uses_fallback(self):
        response = self.post('/api/tasks/calibrate/', {'tasks': []})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['calibration']['ranges']['critical'], [9, 15])

    def test_sort_endpoint_with_filters(self):
        response = self.post('/api/tasks/sort/', {
            'tasks': sample_payload(),
            'sort_by': 'priority-desc',
            'filters': {'category': 'Work'},
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t['id'] for t in response.data['tasks']], ['1', '9', '4', '2'])

    def test_sort_endpoint_rejects_unknown_key(self):
        response = self.post('/api/tasks/sort/', {'tasks': sample_payload(), 'sort_by': 'random'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error_code'], 'ERR_INVALID_SORT')

    def test_schedule_endpoint(self):
        response = self.post('/api/tasks/schedule/', {'tasks': sample_payload()})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 9)
        self.assertEqual(response.data['schedule'][0]['id'], '7')

    def test_insights_endpoint(self):
        response = self.post('/api/tasks/insights/', {'tasks': sample_payload()})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['impact_effort']['quick_wins'], ['3', '7'])
        self.assertEqual(response.data['eisenhower_matrix']['3']['task_ids'], ['4'])

    def test_personalities_endpoint(self):
        response = self.client.get('/api/personalities/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['personalities']), 5)
        self.assertEqual(response.data['default'], 'balanced')

    def test_profile_get_default(self):
        response = self.client.get('/api/profiles/u-9/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['stored'])
        self.assertEqual(response.data['profile']['based_on_template'], 'balanced')

    def test_profile_put_and_get(self):
        response = self.client.put(
            '/api/profiles/u-1/',
            data=json.dumps({
                'based_on_template': 'learner',
                'scheduling_preferences': {'algorithm': 'oodaOptimized'},
            }),
            content_type='application/json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.get('/api/profiles/u-1/')
        self.assertTrue(response.data['stored'])
        self.assertEqual(
            response.data['profile']['scheduling_preferences']['algorithm'],
            'oodaOptimized'
        )

    def test_profile_put_rejects_bad_weights(self):
        response = self.client.put(
            '/api/profiles/u-1/',
            data=json.dumps({'scoring_weights': {'effort': 0}}),
            content_type='application/json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error_code'], 'ERR_INVALID_WEIGHTS')

    def test_profile_put_rejects_unknown_algorithm(self):
        response = self.client.put(
            '/api/profiles/u-1/',
            data=json.dumps({'scheduling_preferences': {'algorithm': 'random'}}),
            content_type='application/json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error_code'], 'ERR_INVALID_ALGORITHM')
        self.assertEqual(response.data['errors'][0]['field'], 'algorithm')

    def test_profile_put_store_failure(self):
        with mock.patch('prioritization.views.ProfileStore.save', return_value=False):
            response = self.client.put(
                '/api/profiles/u-1/',
                data=json.dumps({'profile_name': 'Mine'}),
                content_type='application/json'
            )

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error_code'], 'ERR_STORE_FAILURE')

    def test_profile_reset(self):
        ProfileStore().save("u-1", profile_from_personality("u-1", "firefighter"))
        response = self.client.post('/api/profiles/u-1/reset/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['profile']['based_on_template'], 'balanced')
        self.assertIsNone(ProfileStore().load("u-1"))

    def test_user_schedule(self):
        TaskRecord.objects.create(
            user_id="u-1", title="Quick fix", importance=4, urgency=4,
            impact=4, effort=1, estimated_time=15
        )
        TaskRecord.objects.create(
            user_id="u-1", title="Done already", importance=5, urgency=5,
            impact=5, effort=1, estimated_time=15, status="complete"
        )
        response = self.client.get('/api/users/u-1/schedule/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['schedule']), 1)
        self.assertEqual(response.data['schedule'][0]['title'], 'Quick fix')

    def test_api_info_endpoint(self):
        response = self.client.get('/api/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('endpoints', response.data)
        self.assertIn('matrixHybrid', response.data['algorithms'])

    def test_profile_reset_to_template(self):
        response = self.post('/api/profiles/u-1/reset/', {'template': 'deepWorker'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['stored'])
        self.assertEqual(ProfileStore().load("u-1").algorithm, SchedulingAlgorithm.MATRIX_HYBRID)

    def test_profile_reset_unknown_template(self):
        response = self.post('/api/profiles/u-1/reset/', {'template': 'procrastinator'})

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error_code'], 'ERR_PROFILE_NOT_FOUND')
