"""
Keyed stores for profiles and tasks.

The calculators only need get/set-by-user-id semantics; these classes
provide exactly that on top of the Django models.
"""

import logging
from typing import List, Optional

from django.db import DatabaseError

from .conf import get_setting
from .domain import Task
from .models import ProductivityProfileRecord, TaskRecord
from .profiles import UserProductivityProfile, profile_from_personality

logger = logging.getLogger(__name__)


class ProfileStore:
    """Load and save productivity profiles by user id."""

    def load(self, user_id: str) -> Optional[UserProductivityProfile]:
        """Return the stored profile, or None if the user has none yet."""
        record = ProductivityProfileRecord.objects.filter(user_id=user_id).first()
        if record is None:
            logger.debug("No stored profile for user %s", user_id)
            return None
        return UserProductivityProfile.from_dict({**record.payload, 'user_id': user_id})

    def load_or_default(self, user_id: str) -> UserProductivityProfile:
        """
        Return the stored profile or a fresh one from the default template.

        The default profile is not saved until save() is called.
        """
        profile = self.load(user_id)
        if profile is None:
            profile = profile_from_personality(user_id, get_setting('DEFAULT_PERSONALITY'))
        return profile

    def save(self, user_id: str, profile: UserProductivityProfile) -> bool:
        """
        Replace the stored profile for `user_id` as a whole.

        Returns:
            True on success, False if the database rejected the write.
        """
        payload = profile.to_dict()
        payload['user_id'] = user_id
        try:
            ProductivityProfileRecord.objects.update_or_create(
                user_id=user_id,
                defaults={'payload': payload}
            )
        except DatabaseError:
            logger.error("Failed to save profile for user %s", user_id, exc_info=True)
            return False

        logger.info(
            "Saved profile for user %s (template=%s, algorithm=%s)",
            user_id, profile.based_on_template, profile.algorithm.value
        )
        return True

    def reset(self, user_id: str) -> UserProductivityProfile:
        """Drop the stored profile and return the default one."""
        deleted, _ = ProductivityProfileRecord.objects.filter(user_id=user_id).delete()
        if deleted:
            logger.info("Reset profile for user %s", user_id)
        return self.load_or_default(user_id)


class TaskStore:
    """Read access to a user's stored tasks."""

    def list_tasks(self, user_id: str) -> List[Task]:
        return [record.to_task() for record in TaskRecord.objects.filter(user_id=user_id)]
