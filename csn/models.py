from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict

class ProfileAggregate(BaseModel):
    """
    Read-only snapshot of the profile fields that completion scoring looks at.
    Accepts the camelCase names used by the web API as well as snake_case.
    """
    profile_photo_present: bool = Field(False, alias="profilePhotoPresent")
    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    bio: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    city: Optional[str] = None
    phone_verified: bool = Field(False, alias="phoneVerified")
    email_verified: bool = Field(False, alias="emailVerified")
    interest_count: int = Field(0, ge=0, alias="interestCount")
    has_social_links: bool = Field(False, alias="hasSocialLinks")
    has_accepted_connection: bool = Field(False, alias="hasAcceptedConnection")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

class RuleSpec(BaseModel):
    key: str
    label: str
    points: int = Field(strict=True)
    check: str
    params: Dict[str, Any] = {}
    route: Optional[str] = None

class SuggestionSpec(BaseModel):
    key: str
    text: str

class CompletionSpec(BaseModel):
    rules: List[RuleSpec]
    suggestions: List[SuggestionSpec] = []
