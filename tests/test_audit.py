import json
from pathlib import Path

from csn.engine.audit import CompletionAuditLogger, CompletionLogEntry


def test_audit_logger_writes_entry(tmp_path: Path):
    log_path = tmp_path / "completion_log.jsonl"
    logger = CompletionAuditLogger(log_path)

    entry = CompletionLogEntry(
        timestamp="2024-01-01T00:00:00Z",
        user_id="u1",
        status="ok",
        completion_percentage=45,
        earned_points=45,
        total_points=100,
        missing=("bio", "city"),
    )

    logger.log(entry)
    logger.log(CompletionLogEntry(timestamp="2024-01-01T00:00:01Z", user_id="u9", status="not_found"))

    lines = log_path.read_text().strip().splitlines()
    record = json.loads(lines[0])

    assert record["user_id"] == "u1"
    assert record["completion_percentage"] == 45
    assert record["missing"] == ["bio", "city"]
    assert json.loads(lines[1])["completion_percentage"] is None
