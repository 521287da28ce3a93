from __future__ import annotations

import ssl
from typing import Any, Dict, Protocol

from server.config import ServerConfig
from shared.protocol import ConfigError


class Listener(Protocol):
    """How the server socket is bound: plain TCP or TLS."""

    scheme: str

    def serve_options(self) -> Dict[str, Any]: ...


class PlainListener:
    scheme = "http"

    def serve_options(self) -> Dict[str, Any]:
        return {}


class SecureListener:
    scheme = "https"

    def __init__(self, cert_file: str, key_file: str) -> None:
        self.context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        try:
            self.context.load_cert_chain(cert_file, key_file)
        except (OSError, ssl.SSLError) as exc:
            raise ConfigError(f"Cannot load TLS certificate {cert_file}: {exc}") from exc

    def serve_options(self) -> Dict[str, Any]:
        return {"ssl": self.context}


def select_listener(config: ServerConfig) -> Listener:
    if config.https:
        return SecureListener(str(config.cert_file), str(config.key_file))
    return PlainListener()


__all__ = ["Listener", "PlainListener", "SecureListener", "select_listener"]
