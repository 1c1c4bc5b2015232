from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, Mapping, Optional

from csn.models import ProfileAggregate


class ConfigurationError(ValueError):
    pass


Predicate = Callable[[ProfileAggregate], bool]


@dataclass(frozen=True)
class ChecklistRule:
    key: str
    label: str
    points: int
    predicate: Predicate
    route: Optional[str] = None


TEXT_FIELDS = (str, Optional[str])


def _require_field(field: Any, *allowed: Any) -> str:
    if not isinstance(field, str) or field not in ProfileAggregate.model_fields:
        raise ConfigurationError(f"Unknown profile field: {field!r}")
    annotation = ProfileAggregate.model_fields[field].annotation
    if annotation not in allowed:
        raise ConfigurationError(f"Profile field {field!r} has unsupported type {annotation!r} for this check")
    return field


def flag(field: str) -> Predicate:
    name = _require_field(field, bool)
    return lambda profile: bool(getattr(profile, name))


def non_empty(fields: Iterable[str]) -> Predicate:
    names = tuple(_require_field(f, *TEXT_FIELDS) for f in fields)
    if not names:
        raise ConfigurationError("non_empty needs at least one field")
    return lambda profile: all(getattr(profile, n) for n in names)


def non_blank(field: str) -> Predicate:
    name = _require_field(field, *TEXT_FIELDS)

    def check(profile: ProfileAggregate) -> bool:
        value = getattr(profile, name)
        return value is not None and len(value.strip()) > 0

    return check


def all_present(fields: Iterable[str]) -> Predicate:
    names = tuple(_require_field(f, *TEXT_FIELDS) for f in fields)
    if not names:
        raise ConfigurationError("all_present needs at least one field")
    return lambda profile: all(getattr(profile, n) is not None for n in names)


def min_count(field: str, min: int) -> Predicate:
    name = _require_field(field, int)
    if isinstance(min, bool) or not isinstance(min, int) or min < 0:
        raise ConfigurationError(f"min_count needs a non-negative integer 'min', got {min!r}")
    return lambda profile: getattr(profile, name) >= min


# Named predicate factories usable from the rules YAML ("check" + "params").
PREDICATES: Dict[str, Callable[..., Predicate]] = {
    "flag": flag,
    "non_empty": non_empty,
    "non_blank": non_blank,
    "all_present": all_present,
    "min_count": min_count,
}


def build_predicate(check: str, params: Mapping[str, Any] | None = None) -> Predicate:
    factory = PREDICATES.get(check)
    if factory is None:
        raise ConfigurationError(f"Unknown check '{check}'. Known: {', '.join(PREDICATES)}")
    try:
        return factory(**dict(params or {}))
    except TypeError as e:
        raise ConfigurationError(f"Invalid params for check '{check}': {e}") from e


class RuleSet:
    """
    Ordered, immutable collection of checklist rules.

    Validated once on construction: at least one rule, unique keys,
    strictly positive points. The order is the evaluation order and the
    order of completed/missing items in results.
    """

    def __init__(self, rules: Iterable[ChecklistRule]):
        items = tuple(rules)
        if not items:
            raise ConfigurationError("Rule set is empty.")

        seen = set()
        for rule in items:
            if rule.key in seen:
                raise ConfigurationError(f"Duplicate rule key: {rule.key}")
            seen.add(rule.key)
            if isinstance(rule.points, bool) or not isinstance(rule.points, int) or rule.points <= 0:
                raise ConfigurationError(
                    f"Rule {rule.key} must have positive integer points, got {rule.points!r}"
                )

        total = sum(rule.points for rule in items)
        if total <= 0:
            raise ConfigurationError("Rule set total weight must be greater than zero.")

        self._rules = items
        self._total = total

    @property
    def rules(self) -> tuple[ChecklistRule, ...]:
        return self._rules

    @property
    def total_points(self) -> int:
        return self._total

    def keys(self) -> tuple[str, ...]:
        return tuple(rule.key for rule in self._rules)

    def __iter__(self) -> Iterator[ChecklistRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)


PROFILE_ROUTE = "/dashboard/profile"
CONNECTIONS_ROUTE = "/dashboard/home/connections"

DEFAULT_RULES: tuple[ChecklistRule, ...] = (
    ChecklistRule("profilePicture", "Profile Picture", 15, flag("profile_photo_present"), PROFILE_ROUTE),
    ChecklistRule("fullName", "Full Name", 10, non_empty(["first_name", "last_name"]), PROFILE_ROUTE),
    ChecklistRule("bio", "Bio", 10, non_blank("bio"), PROFILE_ROUTE),
    ChecklistRule("companyPosition", "Company + Position", 10, all_present(["company", "position"]), PROFILE_ROUTE),
    ChecklistRule("city", "City", 5, non_blank("city"), PROFILE_ROUTE),
    ChecklistRule("phoneVerified", "Phone Verified", 10, flag("phone_verified"), PROFILE_ROUTE),
    ChecklistRule("emailVerified", "Email Verified", 10, flag("email_verified"), PROFILE_ROUTE),
    ChecklistRule("interests", "Interests (min 3)", 15, min_count("interest_count", 3), PROFILE_ROUTE),
    ChecklistRule("socialLinks", "Social Links", 10, flag("has_social_links"), PROFILE_ROUTE),
    ChecklistRule("firstConnection", "First Connection", 5, flag("has_accepted_connection"), CONNECTIONS_ROUTE),
)

_DEFAULT_RULE_SET = RuleSet(DEFAULT_RULES)


def default_rule_set() -> RuleSet:
    return _DEFAULT_RULE_SET
