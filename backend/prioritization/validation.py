"""
Caller-side validation with structured error codes.

The calculators accept any numeric input and never validate; API callers
run these checks first so bad ratings are rejected before scoring.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .domain import TaskStatus
from .profiles import SchedulingAlgorithm

RATING_FIELDS = ('importance', 'urgency', 'impact', 'effort')

WEIGHT_FIELDS = (
    'importance', 'urgency', 'impact', 'effort', 'learning_velocity',
    'decision_enablement', 'energy_required', 'skill_growth', 'momentum',
)


class ErrorCode(Enum):
    """Error codes for API responses."""
    SUCCESS = "SUCCESS"
    ERR_MISSING_FIELD = "ERR_MISSING_FIELD"
    ERR_INVALID_RATING = "ERR_INVALID_RATING"
    ERR_INVALID_TIME = "ERR_INVALID_TIME"
    ERR_INVALID_STATUS = "ERR_INVALID_STATUS"
    ERR_INVALID_WEIGHTS = "ERR_INVALID_WEIGHTS"
    ERR_INVALID_ALGORITHM = "ERR_INVALID_ALGORITHM"
    ERR_INVALID_SORT = "ERR_INVALID_SORT"
    ERR_DUPLICATE_ID = "ERR_DUPLICATE_ID"
    ERR_PROFILE_NOT_FOUND = "ERR_PROFILE_NOT_FOUND"
    ERR_STORE_FAILURE = "ERR_STORE_FAILURE"


@dataclass
class ValidationError:
    """Structured validation error with code and details."""
    code: ErrorCode
    message: str
    field: Optional[str] = None
    task_id: Optional[str] = None

    def to_dict(self) -> Dict:
        result = {
            'error_code': self.code.value,
            'message': self.message
        }
        if self.field:
            result['field'] = self.field
        if self.task_id is not None:
            result['task_id'] = self.task_id
        return result


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_tasks(tasks: List[Dict]) -> List[ValidationError]:
    """
    Validate a list of raw task mappings and return any errors found.

    Ratings must be non-negative numbers; there is no upper bound.
    """
    errors = []
    seen_ids = set()

    for i, task in enumerate(tasks):
        if not isinstance(task, dict):
            errors.append(ValidationError(
                code=ErrorCode.ERR_MISSING_FIELD,
                message="Each task must be an object",
                task_id=str(i + 1)
            ))
            continue

        task_id = str(task.get('id', i + 1))

        if not task.get('title') or not str(task.get('title', '')).strip():
            errors.append(ValidationError(
                code=ErrorCode.ERR_MISSING_FIELD,
                message="Task title is required and cannot be empty",
                field='title',
                task_id=task_id
            ))

        for name in RATING_FIELDS:
            value = task.get(name)
            if value is None:
                errors.append(ValidationError(
                    code=ErrorCode.ERR_MISSING_FIELD,
                    message=f"{name.capitalize()} rating is required",
                    field=name,
                    task_id=task_id
                ))
            elif not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    code=ErrorCode.ERR_INVALID_RATING,
                    message=f"{name.capitalize()} must be a non-negative number",
                    field=name,
                    task_id=task_id
                ))

        minutes = task.get('estimated_time', 0)
        if not _is_number(minutes) or minutes < 0:
            errors.append(ValidationError(
                code=ErrorCode.ERR_INVALID_TIME,
                message="Estimated time must be a non-negative number of minutes",
                field='estimated_time',
                task_id=task_id
            ))

        status = task.get('status')
        if status is not None and status not in {s.value for s in TaskStatus}:
            errors.append(ValidationError(
                code=ErrorCode.ERR_INVALID_STATUS,
                message=f"Status must be one of {[s.value for s in TaskStatus]}",
                field='status',
                task_id=task_id
            ))

        if task.get('id') is not None:
            if str(task['id']) in seen_ids:
                errors.append(ValidationError(
                    code=ErrorCode.ERR_DUPLICATE_ID,
                    message=f"Duplicate task ID: {task['id']}",
                    field='id',
                    task_id=task_id
                ))
            seen_ids.add(str(task['id']))

    return errors


def validate_weights(weights: Dict) -> List[ValidationError]:
    """Weights must be strictly positive numbers."""
    errors = []

    for key in WEIGHT_FIELDS:
        if key in weights:
            value = weights[key]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    code=ErrorCode.ERR_INVALID_WEIGHTS,
                    message=f"{key.replace('_', ' ').capitalize()} weight must be a positive number",
                    field=key
                ))

    return errors


def validate_algorithm(name: str) -> List[ValidationError]:
    if isinstance(name, str) and name in {a.value for a in SchedulingAlgorithm}:
        return []
    return [ValidationError(
        code=ErrorCode.ERR_INVALID_ALGORITHM,
        message=f"Invalid algorithm: {name}. Valid options: {[a.value for a in SchedulingAlgorithm]}",
        field='algorithm'
    )]
