"""
URL configuration for the prioritization app.
"""

from django.urls import path
from . import views

urlpatterns = [
    path('', views.api_info, name='api-info'),
    path('tasks/metrics/', views.task_metrics, name='task-metrics'),
    path('tasks/calibrate/', views.calibrate_tasks_view, name='calibrate-tasks'),
    path('tasks/sort/', views.sort_tasks_view, name='sort-tasks'),
    path('tasks/schedule/', views.schedule_tasks, name='schedule-tasks'),
    path('tasks/insights/', views.task_insights, name='task-insights'),
    # Profiles
    path('personalities/', views.list_personalities, name='list-personalities'),
    path('profiles/<str:user_id>/', views.user_profile, name='user-profile'),
    path('profiles/<str:user_id>/reset/', views.reset_profile, name='reset-profile'),
    # Stored tasks
    path('users/<str:user_id>/schedule/', views.user_schedule, name='user-schedule'),
]
