from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class CompletionLogEntry:
    timestamp: str
    user_id: str
    status: str  # "ok" | "not_found"
    completion_percentage: Optional[int] = None
    earned_points: Optional[int] = None
    total_points: Optional[int] = None
    missing: tuple[str, ...] = ()


class CompletionAuditLogger:
    """
    JSONL log of profile completion lookups.
    One line per compute_completion call: the user id, whether the user was
    found, and for found users the score and the keys still missing.
    """

    def __init__(self, path: Path):
        self._path = path

    def log(self, entry: CompletionLogEntry) -> None:
        record = asdict(entry)
        with self._path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record))
            f.write("\n")

    @staticmethod
    def now_iso() -> str:
        return datetime.now(timezone.utc).isoformat()
