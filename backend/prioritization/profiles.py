"""
Productivity profiles and personality templates.

A profile bundles the user's scoring weights, scheduling preferences and
energy curve. Profiles are always passed explicitly into the calculators;
nothing in this package keeps an "active" profile around.

Personality templates:
---------------------
- optimizer:   quick wins, heavy effort penalty, weighted algorithm
- deepWorker:  transformational work, matrix-hybrid algorithm
- firefighter: urgency dominates, weighted algorithm
- learner:     learning and skill growth, OODA algorithm
- balanced:    all weights 1.0 (the default for new users)
"""

import copy
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Dict, List, Optional


class SchedulingAlgorithm(Enum):
    """Strategy used to compute the scheduling weight of a task."""
    WEIGHTED = "weighted"
    MATRIX_HYBRID = "matrixHybrid"
    OODA_OPTIMIZED = "oodaOptimized"


@dataclass
class ProductivityWeights:
    """
    Multipliers applied to task ratings.

    Any positive real is accepted; the configuration UI keeps them in
    0.1-3.0.
    """
    importance: float = 1.0
    urgency: float = 1.0
    impact: float = 1.0
    effort: float = 1.0
    learning_velocity: float = 1.0
    decision_enablement: float = 1.0
    energy_required: float = 1.0
    skill_growth: float = 1.0
    momentum: float = 1.0

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "ProductivityWeights":
        known = {f.name for f in fields(cls)}
        return cls(**{k: float(v) for k, v in data.items() if k in known})


UNIT_WEIGHTS = ProductivityWeights()


@dataclass
class SchedulingPreferences:
    """
    Scheduling configuration.

    Only `algorithm` and `max_tasks_per_day` feed the core computations.
    The working-hours window, cognitive hours, deep-work blocks, batching
    and energy management flags are stored for the configuration UI.
    """
    algorithm: SchedulingAlgorithm = SchedulingAlgorithm.WEIGHTED
    max_tasks_per_day: int = 6
    working_hours_start: str = "09:00"
    working_hours_end: str = "17:00"
    prefer_batching: bool = True
    energy_management: bool = True
    max_cognitive_hours: float = 6
    deep_work_blocks: int = 2

    def __post_init__(self) -> None:
        if not isinstance(self.algorithm, SchedulingAlgorithm):
            self.algorithm = SchedulingAlgorithm(self.algorithm)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["algorithm"] = self.algorithm.value
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "SchedulingPreferences":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class UserProductivityProfile:
    """A user's complete scoring configuration."""
    user_id: str
    profile_name: str = "My Productivity Style"
    based_on_template: str = "balanced"
    scoring_weights: ProductivityWeights = field(default_factory=ProductivityWeights)
    scheduling_preferences: SchedulingPreferences = field(default_factory=SchedulingPreferences)
    energy_curve: List[float] = field(default_factory=lambda: [0.6, 0.9, 1.0, 0.8, 0.7, 0.5])
    adaptive_learning_enabled: bool = True
    auto_adjust_weights: bool = False
    completion_rate_target: float = 0.80

    @property
    def algorithm(self) -> SchedulingAlgorithm:
        return self.scheduling_preferences.algorithm

    def with_overrides(self, **overrides) -> "UserProductivityProfile":
        """
        Return a deep copy of this profile with the given fields replaced.

        This is the only supported way to change part of a profile; the
        stored profile itself is always replaced as a whole.
        """
        return replace(copy.deepcopy(self), **overrides)

    def to_dict(self) -> Dict:
        return {
            "user_id": self.user_id,
            "profile_name": self.profile_name,
            "based_on_template": self.based_on_template,
            "scoring_weights": self.scoring_weights.to_dict(),
            "scheduling_preferences": self.scheduling_preferences.to_dict(),
            "energy_curve": list(self.energy_curve),
            "adaptive_learning_enabled": self.adaptive_learning_enabled,
            "auto_adjust_weights": self.auto_adjust_weights,
            "completion_rate_target": self.completion_rate_target,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "UserProductivityProfile":
        """
        Rebuild a profile from `to_dict()` output or a validated payload.

        Missing sections fall back to the balanced template values.
        """
        base = get_default_profile(str(data.get("user_id", "")))
        return cls(
            user_id=str(data.get("user_id", base.user_id)),
            profile_name=data.get("profile_name", base.profile_name),
            based_on_template=data.get("based_on_template", base.based_on_template),
            scoring_weights=ProductivityWeights.from_dict(
                {**base.scoring_weights.to_dict(), **data.get("scoring_weights", {})}
            ),
            scheduling_preferences=SchedulingPreferences.from_dict(
                {**base.scheduling_preferences.to_dict(),
                 **data.get("scheduling_preferences", {})}
            ),
            energy_curve=list(data.get("energy_curve", base.energy_curve)),
            adaptive_learning_enabled=data.get(
                "adaptive_learning_enabled", base.adaptive_learning_enabled
            ),
            auto_adjust_weights=data.get("auto_adjust_weights", base.auto_adjust_weights),
            completion_rate_target=float(
                data.get("completion_rate_target", base.completion_rate_target)
            ),
        )


@dataclass(frozen=True)
class ProductivityPersonality:
    """A named template a new profile can be based on."""
    id: str
    name: str
    description: str
    scoring_weights: ProductivityWeights
    scheduling_preferences: SchedulingPreferences
    energy_curve: List[float]

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "scoring_weights": self.scoring_weights.to_dict(),
            "scheduling_preferences": self.scheduling_preferences.to_dict(),
            "energy_curve": list(self.energy_curve),
        }


# ==================== Personality Templates ====================

PRODUCTIVITY_PERSONALITIES: List[ProductivityPersonality] = [
    ProductivityPersonality(
        id="optimizer",
        name="The Optimizer",
        description="Maximum efficiency with quick wins and low-effort tasks",
        scoring_weights=ProductivityWeights(
            importance=1.2,
            urgency=1.5,
            impact=1.0,
            effort=2.0,            # heavy penalty for high effort
            learning_velocity=0.8,
            decision_enablement=1.3,
            energy_required=1.5,   # prefer low-energy tasks
            skill_growth=1.0,
            momentum=2.0,
        ),
        scheduling_preferences=SchedulingPreferences(
            algorithm=SchedulingAlgorithm.WEIGHTED,
            max_tasks_per_day=8,
            prefer_batching=True,
            energy_management=True,
            max_cognitive_hours=5,
            deep_work_blocks=1,
        ),
        energy_curve=[0.7, 1.0, 0.9, 0.8, 0.6, 0.4],
    ),
    ProductivityPersonality(
        id="deepWorker",
        name="The Deep Worker",
        description="Maximum impact through focused, transformational work",
        scoring_weights=ProductivityWeights(
            importance=2.0,
            urgency=0.7,
            impact=2.5,
            effort=0.5,
            learning_velocity=1.8,
            decision_enablement=1.5,
            energy_required=0.8,
            skill_growth=2.0,
            momentum=0.6,
        ),
        scheduling_preferences=SchedulingPreferences(
            algorithm=SchedulingAlgorithm.MATRIX_HYBRID,
            max_tasks_per_day=3,
            prefer_batching=False,
            energy_management=True,
            max_cognitive_hours=7,
            deep_work_blocks=3,
        ),
        energy_curve=[0.8, 1.0, 1.0, 0.9, 0.7, 0.5],
    ),
    ProductivityPersonality(
        id="firefighter",
        name="The Firefighter",
        description="Reactive crisis mode with urgency-driven prioritization",
        scoring_weights=ProductivityWeights(
            importance=1.0,
            urgency=3.0,
            impact=0.8,
            effort=1.8,
            learning_velocity=0.5,
            decision_enablement=2.0,
            energy_required=1.2,
            skill_growth=0.7,
            momentum=1.5,
        ),
        scheduling_preferences=SchedulingPreferences(
            algorithm=SchedulingAlgorithm.WEIGHTED,
            max_tasks_per_day=12,
            working_hours_start="08:00",
            working_hours_end="18:00",
            prefer_batching=False,
            energy_management=False,
            max_cognitive_hours=4,
            deep_work_blocks=1,
        ),
        energy_curve=[0.8, 0.9, 1.0, 1.0, 0.9, 0.7],
    ),
    ProductivityPersonality(
        id="learner",
        name="The Learner",
        description="Growth-focused with emphasis on skill development",
        scoring_weights=ProductivityWeights(
            importance=1.2,
            urgency=0.9,
            impact=1.3,
            effort=0.7,
            learning_velocity=2.5,
            decision_enablement=1.2,
            energy_required=0.8,
            skill_growth=2.0,
            momentum=1.1,
        ),
        scheduling_preferences=SchedulingPreferences(
            algorithm=SchedulingAlgorithm.OODA_OPTIMIZED,
            max_tasks_per_day=5,
            prefer_batching=True,
            energy_management=True,
            max_cognitive_hours=6,
            deep_work_blocks=2,
        ),
        energy_curve=[0.6, 0.8, 1.0, 0.9, 0.8, 0.6],
    ),
    ProductivityPersonality(
        id="balanced",
        name="The Balanced",
        description="Well-rounded approach balancing all factors equally",
        scoring_weights=ProductivityWeights(),
        scheduling_preferences=SchedulingPreferences(
            algorithm=SchedulingAlgorithm.WEIGHTED,
            max_tasks_per_day=6,
            prefer_batching=True,
            energy_management=True,
            max_cognitive_hours=6,
            deep_work_blocks=2,
        ),
        energy_curve=[0.6, 0.9, 1.0, 0.8, 0.7, 0.5],
    ),
]


def get_personality_by_id(personality_id: str) -> Optional[ProductivityPersonality]:
    for personality in PRODUCTIVITY_PERSONALITIES:
        if personality.id == personality_id:
            return personality
    return None


def profile_from_personality(
    user_id: str,
    personality_id: str,
    profile_name: str = "My Productivity Style"
) -> UserProductivityProfile:
    """
    Create a fresh profile for `user_id` from a personality template.

    Raises:
        KeyError: if no template with that id exists.
    """
    personality = get_personality_by_id(personality_id)
    if personality is None:
        raise KeyError(f"Unknown personality: {personality_id}")

    return UserProductivityProfile(
        user_id=user_id,
        profile_name=profile_name,
        based_on_template=personality.id,
        scoring_weights=copy.deepcopy(personality.scoring_weights),
        scheduling_preferences=copy.deepcopy(personality.scheduling_preferences),
        energy_curve=list(personality.energy_curve),
        adaptive_learning_enabled=True,
        auto_adjust_weights=False,
        completion_rate_target=0.80,
    )


def get_default_profile(user_id: str) -> UserProductivityProfile:
    """The profile a user gets on first use: the balanced template."""
    return profile_from_personality(user_id, "balanced")
