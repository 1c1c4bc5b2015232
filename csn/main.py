from __future__ import annotations

import json
import sys
from typing import Any, Dict

from pydantic import ValidationError

from csn.config import AppConfig, get_config
from csn.engine.audit import CompletionAuditLogger
from csn.engine.completeness import CompletenessEngine, CompletionResult
from csn.engine.rules import ConfigurationError, default_rule_set
from csn.engine.service import ProfileCompletionService
from csn.engine.store import (
    ConnectionRecord,
    FileProfileStore,
    InterestRecord,
    NotFoundError,
    StoreError,
    UserRecord,
)
from csn.engine.suggestions import DEFAULT_SUGGESTIONS
from csn.models import ProfileAggregate
from csn.rules_loader import load_rules


def usage() -> None:
    print("Commands:")
    print("  python -m csn.main completion <UserId> [--json]")
    print("  python -m csn.main percentage <UserId>")
    print("  python -m csn.main score '<json>'")
    print("  python -m csn.main rules")
    print("  python -m csn.main create-user <UserId> '<json>'")
    print("  python -m csn.main add-interest <UserId> <InterestId> [PUBLIC|CONNECTIONS|PRIVATE]")
    print("  python -m csn.main connect <RequesterId> <AddresseeId> <PENDING|ACCEPTED|DECLINED|BLOCKED>")
    print("")
    print("Examples:")
    print("  python -m csn.main create-user u1 '{\"first_name\": \"Jane\", \"last_name\": \"Doe\"}'")
    print("  python -m csn.main completion u1")
    print(
        "  python -m csn.main score "
        "'{\"firstName\": \"Jane\", \"lastName\": \"Doe\", \"interestCount\": 3}'"
    )


def build_service(config: AppConfig) -> ProfileCompletionService:
    if config.rules_path.exists():
        rule_set, templates = load_rules(config.rules_path)
    else:
        rule_set, templates = default_rule_set(), DEFAULT_SUGGESTIONS

    audit = CompletionAuditLogger(config.audit_log_path) if config.audit_log_path else None
    return ProfileCompletionService(
        FileProfileStore(config.store_path),
        rule_set=rule_set,
        templates=templates,
        audit=audit,
    )


def print_report(result: CompletionResult) -> None:
    print(f"Completion: {result.completion_percentage}% ({result.earned_points}/{result.total_points} points)")
    if result.completed:
        print("Completed:")
        for key in result.completed:
            print(f"  - {key}")
    if result.missing:
        print("Missing:")
        for m in result.missing:
            route = f" -> {m.route}" if m.route else ""
            print(f"  - {m.label} (+{m.points}){route}")
    if result.suggestions:
        print("Suggestions:")
        for s in result.suggestions:
            print(f"  * {s}")


def _parse_object(json_payload: str) -> Dict[str, Any] | None:
    try:
        data = json.loads(json_payload)
    except json.JSONDecodeError as e:
        print(f"❌ Invalid JSON payload: {e}")
        return None

    if not isinstance(data, dict):
        print("❌ JSON payload must be an object/dict.")
        return None
    return data


def cmd_completion(config: AppConfig, user_id: str, as_json: bool) -> int:
    try:
        service = build_service(config)
        result = service.compute_completion(user_id)
    except NotFoundError as e:
        if as_json:
            print(json.dumps({"success": False, "error": {"code": e.code, "message": str(e)}}))
        else:
            print(f"❌ {e}")
        return 1
    except (StoreError, ConfigurationError) as e:
        if as_json:
            code = "VALIDATION_ERROR" if isinstance(e, ConfigurationError) else "INTERNAL_ERROR"
            print(json.dumps({"success": False, "error": {"code": code, "message": str(e)}}))
        else:
            print(f"❌ {e}")
        return 1

    if as_json:
        print(json.dumps({"success": True, "data": result.to_dict()}, indent=2))
    else:
        print_report(result)
    return 0


def cmd_percentage(config: AppConfig, user_id: str) -> int:
    try:
        percent = build_service(config).completion_percentage(user_id)
    except (StoreError, ConfigurationError) as e:
        print(f"❌ {e}")
        return 1

    print(f"{percent}%")
    return 0


def cmd_score(config: AppConfig, json_payload: str) -> int:
    data = _parse_object(json_payload)
    if data is None:
        return 2

    try:
        aggregate = ProfileAggregate.model_validate(data)
    except ValidationError as e:
        print(f"❌ Invalid profile aggregate: {e}")
        return 2

    try:
        service = build_service(config)
    except ConfigurationError as e:
        print(f"❌ {e}")
        return 1

    result = CompletenessEngine().compute(aggregate, service.rule_set, service.templates)
    print_report(result)
    return 0


def cmd_rules(config: AppConfig) -> int:
    try:
        service = build_service(config)
    except ConfigurationError as e:
        print(f"❌ {e}")
        return 1

    rule_set = service.rule_set
    print(f"Rules ({len(rule_set)}, {rule_set.total_points} points):")
    for rule in rule_set:
        print(f"  - {rule.key}: {rule.label} ({rule.points})")
    if service.templates:
        print("Suggestions:")
        for t in service.templates:
            print(f"  - {t.key}: {t.text}")
    return 0


def cmd_create_user(config: AppConfig, user_id: str, json_payload: str) -> int:
    data = _parse_object(json_payload)
    if data is None:
        return 2

    store = FileProfileStore(config.store_path)
    try:
        if store.get_user(user_id) is not None:
            print(f"❌ User already exists: {user_id}")
            return 1
        data.pop("user_id", None)
        record = UserRecord(user_id=user_id, **data)
    except ValidationError as e:
        print(f"❌ Invalid user fields: {e}")
        return 2
    except StoreError as e:
        print(f"❌ {e}")
        return 1

    store.upsert_user(record)
    print(f"✅ Created user {user_id}")
    return 0


def cmd_add_interest(config: AppConfig, user_id: str, interest_id: str, visibility: str) -> int:
    store = FileProfileStore(config.store_path)
    try:
        store.add_interest(InterestRecord(user_id=user_id, interest_id=interest_id, visibility=visibility))
    except StoreError as e:
        print(f"❌ {e}")
        return 1

    print(f"✅ Added interest {interest_id} to {user_id}")
    return 0


def cmd_connect(config: AppConfig, requester_id: str, addressee_id: str, status: str) -> int:
    store = FileProfileStore(config.store_path)
    try:
        store.add_connection(
            ConnectionRecord(requester_id=requester_id, addressee_id=addressee_id, status=status)
        )
    except StoreError as e:
        print(f"❌ {e}")
        return 1

    print(f"✅ Connection {requester_id} -> {addressee_id} ({status})")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = sys.argv if argv is None else argv
    if len(args) < 2:
        usage()
        return 2

    config = get_config()
    cmd = args[1]

    if cmd == "completion":
        if len(args) not in (3, 4) or (len(args) == 4 and args[3] != "--json"):
            usage()
            return 2
        return cmd_completion(config, args[2], len(args) == 4)

    if cmd == "percentage":
        if len(args) != 3:
            usage()
            return 2
        return cmd_percentage(config, args[2])

    if cmd == "score":
        if len(args) != 3:
            usage()
            return 2
        return cmd_score(config, args[2])

    if cmd == "rules":
        return cmd_rules(config)

    if cmd == "create-user":
        if len(args) != 4:
            usage()
            return 2
        return cmd_create_user(config, args[2], args[3])

    if cmd == "add-interest":
        if len(args) not in (4, 5):
            usage()
            return 2
        visibility = args[4] if len(args) == 5 else "PUBLIC"
        return cmd_add_interest(config, args[2], args[3], visibility)

    if cmd == "connect":
        if len(args) != 5:
            usage()
            return 2
        return cmd_connect(config, args[2], args[3], args[4])

    usage()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
