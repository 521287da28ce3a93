from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

GrantType = Literal["password", "authorization_code"]
BodyContentType = Literal["application/json", "application/x-www-form-urlencoded"]


class ApiData(BaseModel):
    """Connection and credential data for one remote API."""

    model_config = ConfigDict(extra="allow")

    base_url: str = Field(..., description="Root url of the api, e.g. https://api.example.com")
    auth_token_path: Optional[str] = Field(None, description="Path exchanging a code or password for a token")
    auth_grant_type: Optional[GrantType] = None
    auth_user_name: Optional[str] = None
    auth_secret: Optional[str] = Field(None, description="Password or access code, depending on the grant type")
    auth_content_type: BodyContentType = "application/json"
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    refresh_token_path: Optional[str] = None
    refresh_content_type: BodyContentType = "application/x-www-form-urlencoded"
    redirect_uri: Optional[str] = None
    token: Optional[Dict[str, Any]] = Field(None, description="Last token response, e.g. {access_token, refresh_token}")

    @property
    def refresh_token(self) -> Optional[str]:
        return (self.token or {}).get("refresh_token")

    @property
    def authorization(self) -> Optional[str]:
        token = self.token or {}
        access_token = token.get("access_token")
        if not access_token:
            return None
        token_type = str(token.get("token_type") or "Bearer")
        return f"{token_type.capitalize()} {access_token}"


class ApiResponse(BaseModel):
    status_code: int
    reason: str = ""
    method: str
    url: str
    headers: Dict[str, str] = Field(default_factory=dict)
    data: Any = Field(None, description="JSON-decoded body, or the text when it is not JSON")


__all__ = ["ApiData", "ApiResponse", "GrantType", "BodyContentType"]
