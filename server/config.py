from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from dotenv import load_dotenv

from shared.protocol import ConfigError, validate_config
from shared.utils import env_flag

DEFAULT_SERVER_CONFIG: Mapping[str, Any] = {
    "server_name": "LocalServer",
    "https": False,
    "server_port": 12345,
    "server_address": "localhost",
    "ping_secs": 10,
    "static_dir": "./static/",
    "cert_file": None,
    "key_file": None,
    "log_level": "INFO",
}

# Config key -> environment variable consulted when the key is not supplied
ENV_VARS: Mapping[str, str] = {
    "server_name": "SERVERNAME",
    "https": "HTTPS",
    "server_port": "PORT",
    "server_address": "SERVERADDRESS",
    "ping_secs": "PINGSECONDS",
    "static_dir": "STATICDIR",
    "cert_file": "TLS_CERTFILE",
    "key_file": "TLS_KEYFILE",
    "log_level": "LOG_LEVEL",
}


@dataclass(frozen=True)
class ServerConfig:
    """Immutable server configuration, resolved once at startup."""

    server_name: str = "LocalServer"
    https: bool = False
    server_port: int = 12345
    server_address: str = "localhost"
    ping_secs: float = 10
    static_dir: Path = Path("./static/")
    cert_file: Optional[Path] = None
    key_file: Optional[Path] = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not 1 <= self.server_port <= 65535:
            raise ConfigError(f"server_port must be within 1-65535, got {self.server_port}")
        if self.ping_secs <= 0:
            raise ConfigError(f"ping_secs must be positive, got {self.ping_secs}")
        if self.https and not (self.cert_file and self.key_file):
            raise ConfigError("https requires both cert_file and key_file")

    @property
    def ping_interval(self) -> float:
        return float(self.ping_secs)


def _env_number(name: str, cast: Callable[[str], Any]) -> Any:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"Environment variable {name} is not a valid number: {raw!r}") from exc


def _from_env(key: str) -> Any:
    name = ENV_VARS[key]
    if key == "https":
        return env_flag(name)
    if key == "server_port":
        return _env_number(name, int)
    if key == "ping_secs":
        return _env_number(name, float)
    return os.getenv(name) or None


def load_server_config(config: Optional[Mapping[str, Any]] = None, env_path: str = ".env") -> ServerConfig:
    """
    Resolve each setting from the in-process ``config`` mapping, then the
    environment (``.env`` included), then the defaults. ``None`` counts as
    not supplied.
    """
    config = dict(config or {})
    validate_config(config)
    if Path(env_path).exists():
        load_dotenv(env_path)

    resolved = {}
    for key, default in DEFAULT_SERVER_CONFIG.items():
        value = config.get(key)
        if value is None:
            value = _from_env(key)
        resolved[key] = default if value is None else value

    return ServerConfig(
        server_name=str(resolved["server_name"]),
        https=bool(resolved["https"]),
        server_port=int(resolved["server_port"]),
        server_address=str(resolved["server_address"]),
        ping_secs=resolved["ping_secs"],
        static_dir=Path(resolved["static_dir"]),
        cert_file=Path(resolved["cert_file"]) if resolved["cert_file"] else None,
        key_file=Path(resolved["key_file"]) if resolved["key_file"] else None,
        log_level=str(resolved["log_level"]).upper(),
    )


__all__ = ["DEFAULT_SERVER_CONFIG", "ServerConfig", "load_server_config"]
