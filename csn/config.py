from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


@dataclass(frozen=True)
class AppConfig:
    store_path: Path
    rules_path: Path
    audit_log_path: Optional[Path]


def get_config() -> AppConfig:
    store_path = Path(os.getenv("CSN_STORE_PATH", "profiles.json"))
    rules_path = Path(os.getenv("CSN_RULES_PATH", "completion_rules.yaml"))
    audit_log = os.getenv("CSN_AUDIT_LOG", "completion_log.jsonl")
    return AppConfig(
        store_path=store_path,
        rules_path=rules_path,
        audit_log_path=Path(audit_log) if audit_log else None,
    )
