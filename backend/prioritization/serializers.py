"""
Serializers for the prioritization API.

These validate and coerce incoming payloads. The resulting dictionaries are
turned into domain objects with Task.from_dict and
UserProductivityProfile.from_dict.
"""

from rest_framework import serializers

from .domain import TaskStatus
from .ordering import SortOption
from .profiles import SchedulingAlgorithm
from .validation import validate_weights


class TaskInputSerializer(serializers.Serializer):
    """
    Serializer for validating incoming task data.

    Tasks submitted for analysis do not need to exist in the database.
    """

    id = serializers.CharField(max_length=64, required=False, allow_null=True)
    title = serializers.CharField(max_length=255, required=True)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    project_id = serializers.CharField(max_length=64, required=False, allow_null=True)

    importance = serializers.FloatField(min_value=0, required=True)
    urgency = serializers.FloatField(min_value=0, required=True)
    impact = serializers.FloatField(min_value=0, required=True)
    effort = serializers.FloatField(min_value=0, required=True)
    estimated_time = serializers.FloatField(min_value=0, required=False, default=0)

    status = serializers.ChoiceField(
        choices=[s.value for s in TaskStatus],
        required=False,
        default=TaskStatus.INCOMPLETE.value
    )
    deadline = serializers.DateTimeField(required=False, allow_null=True)
    created_at = serializers.DateTimeField(required=False)
    modified_at = serializers.DateTimeField(required=False)
    year_assignment = serializers.IntegerField(required=False, allow_null=True)
    month_assignment = serializers.IntegerField(
        min_value=1, max_value=12, required=False, allow_null=True
    )
    week_assignment = serializers.IntegerField(
        min_value=1, max_value=53, required=False, allow_null=True
    )

    def validate_title(self, value):
        """Ensure title is not empty or just whitespace."""
        if not value or not value.strip():
            raise serializers.ValidationError("Title cannot be empty")
        return value.strip()


class ProductivityWeightsSerializer(serializers.Serializer):
    importance = serializers.FloatField(required=False)
    urgency = serializers.FloatField(required=False)
    impact = serializers.FloatField(required=False)
    effort = serializers.FloatField(required=False)
    learning_velocity = serializers.FloatField(required=False)
    decision_enablement = serializers.FloatField(required=False)
    energy_required = serializers.FloatField(required=False)
    skill_growth = serializers.FloatField(required=False)
    momentum = serializers.FloatField(required=False)

    def validate(self, attrs):
        errors = validate_weights(attrs)
        if errors:
            raise serializers.ValidationError({e.field: e.message for e in errors})
        return attrs


class SchedulingPreferencesSerializer(serializers.Serializer):
    algorithm = serializers.ChoiceField(
        choices=[a.value for a in SchedulingAlgorithm],
        required=False
    )
    max_tasks_per_day = serializers.IntegerField(min_value=1, required=False)
    working_hours_start = serializers.RegexField(r'^\d{2}:\d{2}$', required=False)
    working_hours_end = serializers.RegexField(r'^\d{2}:\d{2}$', required=False)
    prefer_batching = serializers.BooleanField(required=False)
    energy_management = serializers.BooleanField(required=False)
    max_cognitive_hours = serializers.FloatField(min_value=0, required=False)
    deep_work_blocks = serializers.IntegerField(min_value=0, required=False)


class ProductivityProfileSerializer(serializers.Serializer):
    """
    A full or partial profile.

    Sections that are left out are filled from the balanced template when
    the profile is built.
    """

    profile_name = serializers.CharField(max_length=100, required=False)
    based_on_template = serializers.CharField(max_length=50, required=False)
    scoring_weights = ProductivityWeightsSerializer(required=False)
    scheduling_preferences = SchedulingPreferencesSerializer(required=False)
    energy_curve = serializers.ListField(
        child=serializers.FloatField(min_value=0, max_value=1),
        min_length=6,
        max_length=6,
        required=False
    )
    adaptive_learning_enabled = serializers.BooleanField(required=False)
    auto_adjust_weights = serializers.BooleanField(required=False)
    completion_rate_target = serializers.FloatField(required=False)

    def validate_completion_rate_target(self, value):
        if not 0 < value <= 1:
            raise serializers.ValidationError("Completion rate target must be in (0, 1]")
        return value


class FilterOptionsSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=['all'] + [s.value for s in TaskStatus],
        required=False,
        default='all'
    )
    category = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    score_range = serializers.ListField(
        child=serializers.FloatField(), min_length=2, max_length=2, required=False
    )
    time_range = serializers.ListField(
        child=serializers.FloatField(), min_length=2, max_length=2, required=False
    )
    quadrant = serializers.IntegerField(min_value=1, max_value=4, required=False)
    search = serializers.CharField(required=False, allow_blank=True, default='')


class TaskBulkInputSerializer(serializers.Serializer):
    """
    Serializer for requests that operate on a task collection.

    The profile comes either inline (`profile`) or from the store
    (`user_id`); an inline profile wins when both are given.
    """

    tasks = serializers.ListField(child=TaskInputSerializer(), allow_empty=True)
    profile = ProductivityProfileSerializer(required=False)
    user_id = serializers.CharField(max_length=64, required=False)
    sort_by = serializers.ChoiceField(
        choices=[o.value for o in SortOption],
        required=False
    )
    filters = FilterOptionsSerializer(required=False)
