"""
Request and response payloads.

Wire field names are capitalized (Code, Token, ID, Roles); the Python side
uses snake_case attributes with aliases.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from api_auth.errors import AuthError, ErrorKind


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class OauthCode(_Payload):
    code: str = Field(default="", alias="Code")

    @classmethod
    def from_body(cls, body: bytes) -> "OauthCode":
        """Decode a raw request body; an empty body means an empty code."""
        if not body.strip():
            return cls()
        try:
            return cls.model_validate_json(body)
        except ValidationError as e:
            raise AuthError(ErrorKind.MALFORMED_REQUEST, f"Invalid oauth code body: {e.errors()[0]['msg']}") from e


class Token(_Payload):
    token: str = Field(alias="Token")


class UserRoles(_Payload):
    id: str = Field(default="", alias="ID")
    roles: List[str] = Field(default_factory=list, alias="Roles")

    @field_validator("roles", mode="before")
    @classmethod
    def _null_roles(cls, value: Optional[List[str]]) -> List[str]:
        return [] if value is None else value
