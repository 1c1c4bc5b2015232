from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from csn.engine.rules import RuleSet
from csn.engine.suggestions import DEFAULT_SUGGESTIONS, SuggestionTemplate, generate_suggestions
from csn.models import ProfileAggregate


@dataclass(frozen=True)
class MissingItem:
    key: str
    label: str
    points: int
    route: Optional[str] = None


@dataclass(frozen=True)
class CompletionResult:
    completion_percentage: int  # 0..100, rounded half up
    total_points: int
    earned_points: int
    completed: tuple[str, ...]
    missing: tuple[MissingItem, ...]
    suggestions: tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "completionPercentage": self.completion_percentage,
            "totalPoints": self.total_points,
            "earnedPoints": self.earned_points,
            "completed": list(self.completed),
            "missing": [
                {"key": m.key, "label": m.label, "points": m.points, "route": m.route}
                for m in self.missing
            ],
            "suggestions": list(self.suggestions),
        }


def percent_half_up(earned: int, total: int) -> int:
    # Exact integer form of floor(100 * earned / total + 0.5)
    return (200 * earned + total) // (2 * total)


class CompletenessEngine:
    """
    Scores a profile aggregate against a weighted checklist.

    Each rule's predicate is evaluated exactly once, in rule-set order.
    Points of completed rules are earned; the percentage is earned over
    total, rounded half up.
    """

    def compute(
        self,
        aggregate: ProfileAggregate,
        rule_set: RuleSet,
        templates: Iterable[SuggestionTemplate] = DEFAULT_SUGGESTIONS,
    ) -> CompletionResult:
        completed = []
        missing = []
        earned = 0

        for rule in rule_set:
            if rule.predicate(aggregate):
                completed.append(rule.key)
                earned += rule.points
            else:
                missing.append(
                    MissingItem(key=rule.key, label=rule.label, points=rule.points, route=rule.route)
                )

        total = rule_set.total_points

        return CompletionResult(
            completion_percentage=percent_half_up(earned, total),
            total_points=total,
            earned_points=earned,
            completed=tuple(completed),
            missing=tuple(missing),
            suggestions=generate_suggestions((m.key for m in missing), templates),
        )
