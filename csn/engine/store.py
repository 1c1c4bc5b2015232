from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from csn.models import ProfileAggregate


class StoreError(ValueError):
    pass


class NotFoundError(StoreError):
    code = "USER_NOT_FOUND"


CONNECTION_STATUSES = ("PENDING", "ACCEPTED", "DECLINED", "BLOCKED")
INTEREST_VISIBILITIES = ("PUBLIC", "CONNECTIONS", "PRIVATE")


class UserRecord(BaseModel):
    user_id: str
    first_name: str = ""
    last_name: str = ""
    profile_photo: Optional[str] = None
    bio: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    city: Optional[str] = None
    phone_verified: bool = False
    email_verified: bool = False
    social_links: Dict[str, str] = {}

    model_config = ConfigDict(extra="forbid")


@dataclass
class InterestRecord:
    user_id: str
    interest_id: str
    visibility: str = "PUBLIC"


@dataclass
class ConnectionRecord:
    requester_id: str
    addressee_id: str
    status: str = "PENDING"


class ProfileRecordReader:
    def load_profile_aggregate(self, user_id: str) -> ProfileAggregate:
        raise NotImplementedError


class FileProfileStore(ProfileRecordReader):
    """
    Simple file-backed profile store.
    Keeps users, interest associations and connections in one JSON file.
    """

    def __init__(self, path: Path):
        self._path = path

    def _read_all(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {"users": {}, "user_interests": [], "connections": []}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise StoreError(f"Invalid store file {self._path}: {e}") from e
        payload.setdefault("users", {})
        payload.setdefault("user_interests", [])
        payload.setdefault("connections", [])
        return payload

    def _write_all(self, payload: Dict[str, Any]) -> None:
        self._path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")

    def _user_from_raw(self, user_id: str, raw: Any) -> UserRecord:
        try:
            return UserRecord.model_validate(raw)
        except ValidationError as e:
            raise StoreError(f"Invalid stored user {user_id}: {e}") from e

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        users = self._read_all()["users"]
        if user_id not in users:
            return None
        return self._user_from_raw(user_id, users[user_id])

    def upsert_user(self, record: UserRecord) -> None:
        payload = self._read_all()
        payload["users"][record.user_id] = record.model_dump()
        self._write_all(payload)

    def add_interest(self, record: InterestRecord) -> None:
        if record.visibility not in INTEREST_VISIBILITIES:
            raise StoreError(f"Unknown visibility '{record.visibility}'. Known: {list(INTEREST_VISIBILITIES)}")
        payload = self._read_all()
        if record.user_id not in payload["users"]:
            raise NotFoundError(f"User not found: {record.user_id}")
        for existing in payload["user_interests"]:
            if existing["user_id"] == record.user_id and existing["interest_id"] == record.interest_id:
                raise StoreError(f"Interest already added: {record.interest_id}")
        payload["user_interests"].append(asdict(record))
        self._write_all(payload)

    def add_connection(self, record: ConnectionRecord) -> None:
        if record.status not in CONNECTION_STATUSES:
            raise StoreError(f"Unknown connection status '{record.status}'. Known: {list(CONNECTION_STATUSES)}")
        if record.requester_id == record.addressee_id:
            raise StoreError("Cannot connect a user with themselves")
        payload = self._read_all()
        for user_id in (record.requester_id, record.addressee_id):
            if user_id not in payload["users"]:
                raise NotFoundError(f"User not found: {user_id}")
        payload["connections"].append(asdict(record))
        self._write_all(payload)

    def load_profile_aggregate(self, user_id: str) -> ProfileAggregate:
        payload = self._read_all()
        raw = payload["users"].get(user_id)
        if raw is None:
            raise NotFoundError(f"User not found: {user_id}")
        user = self._user_from_raw(user_id, raw)

        interests: List[Dict[str, Any]] = payload["user_interests"]
        try:
            interest_count = sum(1 for i in interests if i["user_id"] == user_id)

            # Either direction counts; stops at the first accepted match.
            has_connection = any(
                c["status"] == "ACCEPTED" and user_id in (c["requester_id"], c["addressee_id"])
                for c in payload["connections"]
            )
        except (KeyError, TypeError) as e:
            raise StoreError(f"Invalid interest or connection record in {self._path}: {e!r}") from e

        return ProfileAggregate(
            profile_photo_present=bool(user.profile_photo),
            first_name=user.first_name or "",
            last_name=user.last_name or "",
            bio=user.bio,
            company=user.company,
            position=user.position,
            city=user.city,
            phone_verified=user.phone_verified,
            email_verified=user.email_verified,
            interest_count=interest_count,
            has_social_links=any(v for v in (user.social_links or {}).values()),
            has_accepted_connection=has_connection,
        )
