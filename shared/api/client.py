"""
Async client for token-protected HTTP APIs.

Requests go through httpx. Tokens are obtained with a password or
authorization-code grant, refreshed with the refresh token when one is held,
and an authorized request that comes back 401 is retried once after a refresh.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

import httpx

from shared.protocol import ApiError, StatusCode
from shared.utils import log_msg

from .models import ApiData, ApiResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def encode_grant(fields: Mapping[str, Optional[str]], content_type: str) -> str:
    """Encode token request fields as JSON or as a urlencoded form."""
    if content_type == "application/json":
        return json.dumps(dict(fields))
    return urlencode({key: value for key, value in fields.items() if value is not None})


class ApiClient:
    def __init__(
        self,
        api_data: ApiData,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_data = api_data
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        path: str,
        method: Optional[str] = None,
        data: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        auth: Optional[str] = None,
    ) -> ApiResponse:
        """
        Perform one request against ``base_url + path``.

        The method defaults to POST when ``data`` is given and GET otherwise.
        ``auth`` is a "user:password" pair sent as basic authentication.

        Raises:
            ApiError: on transport failure or a status code of 300 or above.
        """
        method = (method or ("POST" if data else "GET")).upper()
        url = self.api_data.base_url + path
        basic = tuple(auth.split(":", 1)) if auth else None
        try:
            response = await self._client.request(method, url, content=data, headers=headers, auth=basic)
        except httpx.RequestError as exc:
            raise ApiError(f"API {method} request to {url} - response error: {exc}") from exc

        if response.status_code >= 300:
            raise ApiError(
                f"API {method} request to {url} - response failed; returned Status Code: {response.status_code}",
                response.status_code,
            )
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text
        return ApiResponse(
            status_code=response.status_code,
            reason=response.reason_phrase,
            method=method,
            url=str(response.url),
            headers=dict(response.headers),
            data=body,
        )

    async def get_token(self) -> ApiData:
        """
        Refresh the token, or obtain a new one when there is no refresh token
        or refreshing fails. Problems are logged; the api data is returned
        either way.
        """
        api = self.api_data
        if api.refresh_token and api.refresh_token_path:
            try:
                api.token = await self._post_token(api.refresh_token_path, self._refresh_fields(), api.refresh_content_type)
                return api
            except ApiError as exc:
                log_msg(
                    f"Problem refreshing Authentication Token from {api.base_url + api.refresh_token_path}: {exc}. "
                    "Attempting to get a new Token..."
                )

        fields = self._grant_fields()
        if not api.auth_token_path or fields is None:
            log_msg(f"No token grant configured for {api.base_url}", "warning")
            return api
        try:
            api.token = await self._post_token(api.auth_token_path, fields, api.auth_content_type)
        except ApiError as exc:
            log_msg(f"Problem obtaining Authentication Token from {api.base_url + api.auth_token_path}: {exc}.")
        return api

    async def authorized_request(
        self,
        path: str,
        method: Optional[str] = None,
        data: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> ApiResponse:
        """Request with the current token; on 401 refresh once and retry once."""
        if self.api_data.token is None:
            await self.get_token()
        try:
            return await self.request(path, method, data, self._with_authorization(headers))
        except ApiError as exc:
            if exc.status_code != StatusCode.UNAUTHORIZED:
                raise
            logger.info("Token rejected by %s; refreshing and retrying once", self.api_data.base_url)
        await self.get_token()
        return await self.request(path, method, data, self._with_authorization(headers))

    async def _post_token(self, path: str, fields: Mapping[str, Optional[str]], content_type: str) -> Dict[str, Any]:
        response = await self.request(path, "POST", encode_grant(fields, content_type), {"Content-Type": content_type})
        if not isinstance(response.data, dict):
            raise ApiError(f"Token response from {response.url} is not a JSON object", response.status_code)
        return response.data

    def _refresh_fields(self) -> Dict[str, Optional[str]]:
        api = self.api_data
        return {
            "grant_type": "refresh_token",
            "refresh_token": api.refresh_token,
            "client_id": api.client_id,
            "client_secret": api.client_secret,
            "redirect_uri": api.redirect_uri,
        }

    def _grant_fields(self) -> Optional[Dict[str, Optional[str]]]:
        api = self.api_data
        if api.auth_grant_type == "password":
            return {
                "grant_type": "password",
                "username": api.auth_user_name,
                "password": api.auth_secret,
                "redirect_uri": api.redirect_uri,
            }
        if api.auth_grant_type == "authorization_code":
            return {
                "grant_type": "authorization_code",
                "code": api.auth_secret,
                "client_id": api.client_id,
                "client_secret": api.client_secret,
                "redirect_uri": api.redirect_uri,
            }
        return None

    def _with_authorization(self, headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        merged = dict(headers or {})
        authorization = self.api_data.authorization
        if authorization:
            merged["Authorization"] = authorization
        return merged


__all__ = ["ApiClient", "encode_grant"]
