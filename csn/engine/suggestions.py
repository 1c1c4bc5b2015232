from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class SuggestionTemplate:
    key: str
    text: str


# Priority order; independent of the rule evaluation order.
DEFAULT_SUGGESTIONS: tuple[SuggestionTemplate, ...] = (
    SuggestionTemplate("profilePicture", "Add a profile picture to boost trust"),
    SuggestionTemplate("interests", "Add at least 3 interests to improve discovery"),
    SuggestionTemplate("bio", "Write a bio to help others understand your business"),
    SuggestionTemplate("companyPosition", "Complete your company and position details"),
    SuggestionTemplate("firstConnection", "Make your first connection to start networking"),
)


def generate_suggestions(
    missing_keys: Iterable[str],
    templates: Iterable[SuggestionTemplate] = DEFAULT_SUGGESTIONS,
) -> tuple[str, ...]:
    """
    Curated next steps for the missing checklist items.
    Keys without a template produce nothing.
    """
    missing = set(missing_keys)
    return tuple(t.text for t in templates if t.key in missing)
