from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import ValidationError

from csn.engine.rules import ChecklistRule, ConfigurationError, RuleSet, build_predicate
from csn.engine.suggestions import SuggestionTemplate
from csn.models import CompletionSpec

def load_spec(rules_path: str | Path) -> CompletionSpec:
    path = Path(rules_path)
    try:
        raw: Dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    try:
        return CompletionSpec.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid completion rules in {path}: {e}") from e


def build_rule_set(spec: CompletionSpec) -> RuleSet:
    return RuleSet(
        ChecklistRule(
            key=r.key,
            label=r.label,
            points=r.points,
            predicate=build_predicate(r.check, r.params),
            route=r.route,
        )
        for r in spec.rules
    )


def build_templates(spec: CompletionSpec) -> tuple[SuggestionTemplate, ...]:
    return tuple(SuggestionTemplate(key=s.key, text=s.text) for s in spec.suggestions)


def load_rules(rules_path: str | Path) -> tuple[RuleSet, tuple[SuggestionTemplate, ...]]:
    spec = load_spec(rules_path)
    return build_rule_set(spec), build_templates(spec)
