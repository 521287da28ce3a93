from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from shared.api.models import ApiData

# ApiData field -> environment variable, per API prefix (e.g. CRM_API_BASE_URL)
API_ENV_FIELDS: Dict[str, str] = {
    "base_url": "BASE_URL",
    "auth_token_path": "AUTH_TOKEN_PATH",
    "auth_grant_type": "AUTH_GRANT_TYPE",
    "auth_user_name": "AUTH_USER_NAME",
    "auth_secret": "AUTH_SECRET",
    "auth_content_type": "AUTH_CONTENT_TYPE",
    "client_id": "CLIENT_ID",
    "client_secret": "CLIENT_SECRET",
    "refresh_token_path": "REFRESH_TOKEN_PATH",
    "refresh_content_type": "REFRESH_CONTENT_TYPE",
    "redirect_uri": "REDIRECT_URI",
}


def load_api_data(prefix: str, env_path: str = ".env") -> Optional[ApiData]:
    """Load ApiData from ``<PREFIX>_API_*`` variables in env/.env; None without a base url."""
    if Path(env_path).exists():
        load_dotenv(env_path)
    values: Dict[str, Any] = {}
    for field_name, suffix in API_ENV_FIELDS.items():
        value = os.getenv(f"{prefix.upper()}_API_{suffix}")
        if value:
            values[field_name] = value
    if "base_url" not in values:
        return None
    return ApiData(**values)


__all__ = ["API_ENV_FIELDS", "load_api_data"]
