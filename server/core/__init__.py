from .connection import Connection, ConnectionState, SendResult, send
from .connection_manager import ConnectionRegistry
from .router import StaticRequestHandler, resolve_file_name
from .server import AppServer, MessageHandler
from .transport import PlainListener, SecureListener, select_listener

__all__ = [
    "Connection",
    "ConnectionState",
    "SendResult",
    "send",
    "ConnectionRegistry",
    "StaticRequestHandler",
    "resolve_file_name",
    "AppServer",
    "MessageHandler",
    "PlainListener",
    "SecureListener",
    "select_listener",
]
