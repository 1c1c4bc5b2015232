from __future__ import annotations

from typing import Iterable, Optional

from csn.engine.audit import CompletionAuditLogger, CompletionLogEntry
from csn.engine.completeness import CompletenessEngine, CompletionResult
from csn.engine.rules import ConfigurationError, RuleSet, default_rule_set
from csn.engine.store import NotFoundError, ProfileRecordReader
from csn.engine.suggestions import DEFAULT_SUGGESTIONS, SuggestionTemplate


class ProfileCompletionService:
    """
    Entry point for profile completion: load the user's aggregate,
    score it against the rule set, and return a fresh result.
    Store errors propagate to the caller unchanged.
    """

    def __init__(
        self,
        reader: ProfileRecordReader,
        rule_set: Optional[RuleSet] = None,
        templates: Optional[Iterable[SuggestionTemplate]] = None,
        audit: Optional[CompletionAuditLogger] = None,
    ):
        self._reader = reader
        self._rule_set = rule_set if rule_set is not None else default_rule_set()
        self._templates = tuple(templates) if templates is not None else DEFAULT_SUGGESTIONS
        self._audit = audit
        self._engine = CompletenessEngine()

        known = set(self._rule_set.keys())
        for t in self._templates:
            if t.key not in known:
                raise ConfigurationError(f"Suggestion template for unknown rule: {t.key}")

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    @property
    def templates(self) -> tuple[SuggestionTemplate, ...]:
        return self._templates

    def compute_completion(self, user_id: str) -> CompletionResult:
        try:
            aggregate = self._reader.load_profile_aggregate(user_id)
        except NotFoundError:
            if self._audit is not None:
                self._audit.log(
                    CompletionLogEntry(
                        timestamp=CompletionAuditLogger.now_iso(),
                        user_id=user_id,
                        status="not_found",
                    )
                )
            raise

        result = self._engine.compute(aggregate, self._rule_set, self._templates)

        if self._audit is not None:
            self._audit.log(
                CompletionLogEntry(
                    timestamp=CompletionAuditLogger.now_iso(),
                    user_id=user_id,
                    status="ok",
                    completion_percentage=result.completion_percentage,
                    earned_points=result.earned_points,
                    total_points=result.total_points,
                    missing=tuple(m.key for m in result.missing),
                )
            )
        return result

    def completion_percentage(self, user_id: str) -> int:
        return self.compute_completion(user_id).completion_percentage
