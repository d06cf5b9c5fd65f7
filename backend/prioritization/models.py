"""
Stored representation of tasks and productivity profiles.

Profiles are kept as one JSON document per user id; the scoring code never
touches these models directly and works on the dataclasses in domain.py
and profiles.py instead.
"""

from django.core.validators import MinValueValidator
from django.db import models

from .domain import Task, TaskStatus


class TaskRecord(models.Model):
    """
    A user's task as persisted by the task forms.

    Attributes:
        user_id: Owner of the task
        importance/urgency/impact/effort: Ratings, nominally 1-5
        estimated_time: Expected duration in minutes
        status: incomplete, in-progress or complete
    """

    STATUS_CHOICES = [(s.value, s.value) for s in TaskStatus]

    user_id = models.CharField(max_length=64, db_index=True)
    title = models.CharField(max_length=255, help_text="Task title")
    description = models.TextField(blank=True, null=True)
    category = models.CharField(max_length=100, blank=True, default="")
    notes = models.TextField(blank=True, null=True)
    project_id = models.CharField(max_length=64, blank=True, null=True)

    importance = models.FloatField(validators=[MinValueValidator(0)])
    urgency = models.FloatField(validators=[MinValueValidator(0)])
    impact = models.FloatField(validators=[MinValueValidator(0)])
    effort = models.FloatField(validators=[MinValueValidator(0)])
    estimated_time = models.FloatField(
        default=0,
        validators=[MinValueValidator(0)],
        help_text="Estimated minutes to complete"
    )

    status = models.CharField(
        max_length=16,
        choices=STATUS_CHOICES,
        default=TaskStatus.INCOMPLETE.value
    )
    deadline = models.DateTimeField(null=True, blank=True)
    year_assignment = models.IntegerField(null=True, blank=True)
    month_assignment = models.IntegerField(null=True, blank=True)
    week_assignment = models.IntegerField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    modified_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} ({self.status})"

    def to_task(self) -> Task:
        return Task(
            id=str(self.pk),
            title=self.title,
            description=self.description,
            category=self.category,
            notes=self.notes,
            project_id=self.project_id,
            importance=self.importance,
            urgency=self.urgency,
            impact=self.impact,
            effort=self.effort,
            estimated_time=self.estimated_time,
            status=TaskStatus(self.status),
            created_at=self.created_at,
            modified_at=self.modified_at,
            deadline=self.deadline,
            year_assignment=self.year_assignment,
            month_assignment=self.month_assignment,
            week_assignment=self.week_assignment,
        )


class ProductivityProfileRecord(models.Model):
    """One productivity profile per user, stored as a JSON document."""

    user_id = models.CharField(max_length=64, unique=True)
    payload = models.JSONField(default=dict)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Profile for {self.user_id}"
