"""
API Views for task prioritization.

This module wires the pure scoring, calibration and ordering functions to
REST endpoints. Every task endpoint accepts the same body:

{
    "tasks": [...],
    "profile": {...},        // Optional inline profile
    "user_id": "u-1",        // Optional: use this user's stored profile
    "sort_by": "...",        // /tasks/sort/ only
    "filters": {...}         // /tasks/sort/ only
}

With neither `profile` nor `user_id` the profile-less formulas apply.
"""

import logging
from typing import Dict, List, Optional

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, throttle_classes
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle

from .calibration import calibrate_task, compute_calibration
from .conf import get_setting
from .domain import Task
from .insights import group_by_impact_effort, group_by_quadrant, summarize_tasks
from .ordering import FilterOptions, filter_tasks, generate_optimal_schedule, sort_tasks
from .profiles import (
    PRODUCTIVITY_PERSONALITIES,
    SchedulingAlgorithm,
    UserProductivityProfile,
    profile_from_personality,
)
from .scoring import MetricsCalculator, priority_label, quadrant_label
from .serializers import ProductivityProfileSerializer, TaskBulkInputSerializer
from .store import ProfileStore, TaskStore
from .validation import ErrorCode, validate_algorithm, validate_tasks

logger = logging.getLogger(__name__)


# ============================================
# RATE LIMITING CLASSES
# ============================================

class AnalyzeRateThrottle(AnonRateThrottle):
    """Rate limit for the task analysis endpoints."""
    scope = 'analyze'
    rate = get_setting('THROTTLE_RATES')['analyze']


class ProfileRateThrottle(AnonRateThrottle):
    """Rate limit for profile reads and writes."""
    scope = 'profile'
    rate = get_setting('THROTTLE_RATES')['profile']


# ============================================
# HELPERS
# ============================================

def _error_response(
    code: ErrorCode,
    message: str,
    http_status: int = status.HTTP_400_BAD_REQUEST,
    errors=None
) -> Response:
    body = {
        'success': False,
        'error_code': code.value,
        'message': message,
    }
    if errors is not None:
        body['errors'] = errors
    return Response(body, status=http_status)


def _build_tasks(validated_tasks: List[Dict]) -> List[Task]:
    tasks = []
    for i, data in enumerate(validated_tasks):
        if not data.get('id'):
            data = {**data, 'id': str(i + 1)}
        tasks.append(Task.from_dict(data))
    return tasks


def _resolve_profile(validated: Dict) -> Optional[UserProductivityProfile]:
    """Inline profile first, then the stored profile of `user_id`."""
    user_id = validated.get('user_id')
    if 'profile' in validated:
        return UserProductivityProfile.from_dict(
            {**validated['profile'], 'user_id': user_id or ''}
        )
    if user_id:
        return ProfileStore().load_or_default(user_id)
    return None


def _parse_task_request(request: Request):
    """
    Validate a task-collection request.

    Returns:
        Tuple of (validated data, tasks, profile) on success, or an error
        Response.
    """
    raw_tasks = request.data.get('tasks')
    if not isinstance(raw_tasks, list):
        return _error_response(
            ErrorCode.ERR_MISSING_FIELD,
            "A 'tasks' list is required."
        )

    task_errors = validate_tasks(raw_tasks)
    if task_errors:
        return _error_response(
            task_errors[0].code,
            'Invalid input data. Please check your tasks format.',
            errors=[e.to_dict() for e in task_errors]
        )

    serializer = TaskBulkInputSerializer(data=request.data)
    if not serializer.is_valid():
        code = ErrorCode.ERR_MISSING_FIELD
        if 'sort_by' in serializer.errors:
            code = ErrorCode.ERR_INVALID_SORT
        return _error_response(
            code,
            'Invalid input data. Please check your request format.',
            errors=serializer.errors
        )

    validated = serializer.validated_data
    return validated, _build_tasks(validated['tasks']), _resolve_profile(validated)


def _task_with_metrics(task: Task, calculator: MetricsCalculator) -> Dict:
    metrics = calculator.compute(task)
    return {
        **task.to_dict(),
        'metrics': metrics.to_dict(),
        'quadrant_label': quadrant_label(metrics.eisenhower_quadrant),
        'priority_label': priority_label(metrics.priority_score),
    }


def _profile_summary(profile: Optional[UserProductivityProfile]) -> Dict:
    if profile is None:
        return {
            'personalized': False,
            'algorithm': SchedulingAlgorithm.WEIGHTED.value,
        }
    return {
        'personalized': True,
        'algorithm': profile.algorithm.value,
        'based_on_template': profile.based_on_template,
    }


# ============================================
# TASK ENDPOINTS
# ============================================

@extend_schema(
    summary="Compute task metrics",
    description="Priority score, scheduling weight, Eisenhower quadrant and impact/effort ratio per task.",
    request=TaskBulkInputSerializer,
    responses={200: OpenApiTypes.OBJECT},
    tags=['Analysis']
)
@api_view(['POST'])
@throttle_classes([AnalyzeRateThrottle])
def task_metrics(request: Request) -> Response:
    """
    POST /api/tasks/metrics/
    """
    parsed = _parse_task_request(request)
    if isinstance(parsed, Response):
        return parsed
    _, tasks, profile = parsed

    calculator = MetricsCalculator(profile)
    return Response({
        'success': True,
        'error_code': ErrorCode.SUCCESS.value,
        'count': len(tasks),
        'profile': _profile_summary(profile),
        'tasks': [_task_with_metrics(t, calculator) for t in tasks],
    })


@extend_schema(
    summary="Calibrate task scores",
    description="""
    Build a calibration snapshot (percentiles, priority ranges, averages,
    benchmarks) for the submitted collection and label each task with its
    priority level and percentile. An empty collection returns the default
    calibration.
    """,
    request=TaskBulkInputSerializer,
    responses={200: OpenApiTypes.OBJECT},
    tags=['Analysis']
)
@api_view(['POST'])
@throttle_classes([AnalyzeRateThrottle])
def calibrate_tasks_view(request: Request) -> Response:
    """
    POST /api/tasks/calibrate/
    """
    parsed = _parse_task_request(request)
    if isinstance(parsed, Response):
        return parsed
    _, tasks, profile = parsed

    calibration = compute_calibration(tasks, profile)
    calibrated = [calibrate_task(t, calibration, profile) for t in tasks]

    level_counts = {level: 0 for level in ('critical', 'high', 'medium', 'low')}
    for item in calibrated:
        level_counts[item.priority_level] += 1

    return Response({
        'success': True,
        'error_code': ErrorCode.SUCCESS.value,
        'count': len(calibrated),
        'profile': _profile_summary(profile),
        'calibration': calibration.to_dict(),
        'tasks': [item.to_dict() for item in calibrated],
        'summary': level_counts,
    })


@extend_schema(
    summary="Filter and sort tasks",
    request=TaskBulkInputSerializer,
    responses={200: OpenApiTypes.OBJECT},
    tags=['Ordering']
)
@api_view(['POST'])
@throttle_classes([AnalyzeRateThrottle])
def sort_tasks_view(request: Request) -> Response:
    """
    POST /api/tasks/sort/
    """
    parsed = _parse_task_request(request)
    if isinstance(parsed, Response):
        return parsed
    validated, tasks, profile = parsed

    sort_by = validated.get('sort_by', get_setting('DEFAULT_SORT'))
    if 'filters' in validated:
        filters = validated['filters']
        options = FilterOptions(
            status=filters.get('status', 'all'),
            category=filters.get('category'),
            score_range=tuple(filters['score_range']) if 'score_range' in filters else None,
            time_range=tuple(filters['time_range']) if 'time_range' in filters else None,
            quadrant=filters.get('quadrant'),
            search=filters.get('search', ''),
        )
        tasks = filter_tasks(tasks, options, profile)

    ordered = sort_tasks(tasks, sort_by, profile)
    calculator = MetricsCalculator(profile)

    return Response({
        'success': True,
        'error_code': ErrorCode.SUCCESS.value,
        'sort_by': sort_by,
        'count': len(ordered),
        'tasks': [_task_with_metrics(t, calculator) for t in ordered],
    })


@extend_schema(
    summary="Recommended work order",
    description="Open tasks ordered by scheduling weight under the selected algorithm.",
    request=TaskBulkInputSerializer,
    responses={200: OpenApiTypes.OBJECT},
    tags=['Ordering']
)
@api_view(['POST'])
@throttle_classes([AnalyzeRateThrottle])
def schedule_tasks(request: Request) -> Response:
    """
    POST /api/tasks/schedule/
    """
    parsed = _parse_task_request(request)
    if isinstance(parsed, Response):
        return parsed
    _, tasks, profile = parsed

    schedule = generate_optimal_schedule(tasks, profile)
    calculator = MetricsCalculator(profile)

    return Response({
        'success': True,
        'error_code': ErrorCode.SUCCESS.value,
        'profile': _profile_summary(profile),
        'count': len(schedule),
        'schedule': [_task_with_metrics(t, calculator) for t in schedule],
    })


@extend_schema(
    summary="Dashboard insights",
    description="Summary counts plus impact/effort and Eisenhower groupings.",
    request=TaskBulkInputSerializer,
    responses={200: OpenApiTypes.OBJECT},
    tags=['Analysis']
)
@api_view(['POST'])
@throttle_classes([AnalyzeRateThrottle])
def task_insights(request: Request) -> Response:
    """
    POST /api/tasks/insights/
    """
    parsed = _parse_task_request(request)
    if isinstance(parsed, Response):
        return parsed
    _, tasks, profile = parsed

    impact_effort = group_by_impact_effort(tasks)
    quadrants = group_by_quadrant(tasks, profile)

    return Response({
        'success': True,
        'error_code': ErrorCode.SUCCESS.value,
        'summary': summarize_tasks(tasks, profile),
        'impact_effort': {
            name: [t.id for t in group] for name, group in impact_effort.items()
        },
        'eisenhower_matrix': {
            str(int(q)): {
                'label': quadrant_label(q),
                'task_ids': [t.id for t in group],
            }
            for q, group in quadrants.items()
        },
    })


# ============================================
# PROFILE ENDPOINTS
# ============================================

@extend_schema(
    summary="List personality templates",
    responses={200: OpenApiTypes.OBJECT},
    tags=['Profiles']
)
@api_view(['GET'])
def list_personalities(request: Request) -> Response:
    """
    GET /api/personalities/
    """
    return Response({
        'success': True,
        'personalities': [p.to_dict() for p in PRODUCTIVITY_PERSONALITIES],
        'default': get_setting('DEFAULT_PERSONALITY'),
    })


@extend_schema(
    summary="Read or replace a user's productivity profile",
    request=ProductivityProfileSerializer,
    responses={200: OpenApiTypes.OBJECT},
    tags=['Profiles']
)
@api_view(['GET', 'PUT'])
@throttle_classes([ProfileRateThrottle])
def user_profile(request: Request, user_id: str) -> Response:
    """
    GET /api/profiles/<user_id>/
    PUT /api/profiles/<user_id>/

    GET returns the stored profile, or the default one when the user has
    not saved a profile yet (`stored` is False in that case). PUT replaces
    the stored profile; omitted sections come from the balanced template.
    """
    store = ProfileStore()

    if request.method == 'GET':
        profile = store.load(user_id)
        stored = profile is not None
        if profile is None:
            profile = store.load_or_default(user_id)
        return Response({
            'success': True,
            'stored': stored,
            'profile': profile.to_dict(),
        })

    preferences = request.data.get('scheduling_preferences')
    if isinstance(preferences, dict) and 'algorithm' in preferences:
        algorithm_errors = validate_algorithm(preferences['algorithm'])
        if algorithm_errors:
            return _error_response(
                ErrorCode.ERR_INVALID_ALGORITHM,
                algorithm_errors[0].message,
                errors=[e.to_dict() for e in algorithm_errors]
            )

    serializer = ProductivityProfileSerializer(data=request.data)
    if not serializer.is_valid():
        return _error_response(
            ErrorCode.ERR_INVALID_WEIGHTS,
            'Invalid profile data.',
            errors=serializer.errors
        )

    profile = UserProductivityProfile.from_dict({**serializer.validated_data, 'user_id': user_id})
    if not store.save(user_id, profile):
        return _error_response(
            ErrorCode.ERR_STORE_FAILURE,
            'Failed to save productivity settings.',
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return Response({
        'success': True,
        'stored': True,
        'profile': profile.to_dict(),
    })


@extend_schema(
    summary="Reset a user's profile to the default template",
    request=OpenApiTypes.OBJECT,
    responses={200: OpenApiTypes.OBJECT},
    tags=['Profiles']
)
@api_view(['POST'])
@throttle_classes([ProfileRateThrottle])
def reset_profile(request: Request, user_id: str) -> Response:
    """
    POST /api/profiles/<user_id>/reset/

    Without a body the stored profile is dropped and the default one is
    returned. With {"template": "<personality id>"} the profile is replaced
    by a fresh copy of that template.
    """
    store = ProfileStore()
    template = request.data.get('template')

    if not template:
        profile = store.reset(user_id)
        return Response({
            'success': True,
            'stored': False,
            'profile': profile.to_dict(),
        })

    try:
        profile = profile_from_personality(user_id, template)
    except KeyError:
        return _error_response(
            ErrorCode.ERR_PROFILE_NOT_FOUND,
            f"Unknown personality template: {template}",
            http_status=status.HTTP_404_NOT_FOUND
        )

    if not store.save(user_id, profile):
        return _error_response(
            ErrorCode.ERR_STORE_FAILURE,
            'Failed to save productivity settings.',
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return Response({
        'success': True,
        'stored': True,
        'profile': profile.to_dict(),
    })


@extend_schema(
    summary="Schedule a user's stored tasks",
    description="Recommended work order and calibration for the user's stored tasks and profile.",
    responses={200: OpenApiTypes.OBJECT},
    tags=['Ordering']
)
@api_view(['GET'])
@throttle_classes([AnalyzeRateThrottle])
def user_schedule(request: Request, user_id: str) -> Response:
    """
    GET /api/users/<user_id>/schedule/
    """
    tasks = TaskStore().list_tasks(user_id)
    profile = ProfileStore().load_or_default(user_id)

    calibration = compute_calibration(tasks, profile)
    schedule = generate_optimal_schedule(tasks, profile)
    calculator = MetricsCalculator(profile)

    logger.debug("Scheduled %d of %d tasks for user %s", len(schedule), len(tasks), user_id)

    return Response({
        'success': True,
        'error_code': ErrorCode.SUCCESS.value,
        'user_id': user_id,
        'profile': _profile_summary(profile),
        'calibration': calibration.to_dict(),
        'schedule': [
            {
                **_task_with_metrics(t, calculator),
                'priority_level': calibrate_task(t, calibration, profile).priority_level,
            }
            for t in schedule
        ],
    })


# ============================================
# INFO
# ============================================

@extend_schema(
    summary="API information",
    description="Get API information and available endpoints.",
    responses={200: OpenApiTypes.OBJECT},
    tags=['Info']
)
@api_view(['GET'])
def api_info(request: Request) -> Response:
    """
    GET /api/
    """
    return Response({
        'name': 'Agenta Prioritization API',
        'version': '1.0.0',
        'documentation': '/api/docs/',
        'features': [
            'Personalized priority scoring',
            'Weighted, matrix-hybrid and OODA scheduling algorithms',
            'Eisenhower Matrix classification',
            'Percentile-based score calibration',
            'Recommended work order',
            'Productivity personality templates',
        ],
        'endpoints': {
            'POST /api/tasks/metrics/': 'Per-task metrics',
            'POST /api/tasks/calibrate/': 'Calibration snapshot and priority levels',
            'POST /api/tasks/sort/': 'Filter and sort tasks',
            'POST /api/tasks/schedule/': 'Recommended work order',
            'POST /api/tasks/insights/': 'Dashboard summary and groupings',
            'GET /api/personalities/': 'Personality templates',
            'GET|PUT /api/profiles/<user_id>/': 'Read or replace a profile',
            'POST /api/profiles/<user_id>/reset/': 'Reset a profile to defaults',
            'GET /api/users/<user_id>/schedule/': 'Schedule stored tasks',
            'GET /api/docs/': 'Interactive API documentation',
            'GET /api/': 'This info endpoint'
        },
        'algorithms': [a.value for a in SchedulingAlgorithm],
        'error_codes': {
            code.value: code.name for code in ErrorCode
        }
    })
