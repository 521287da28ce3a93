"""Protocol-wide constants shared by the HTTP and WebSocket surfaces."""

ENCODING = "utf-8"
INDEX_FILE = "index.html"
INDEX_ALIASES = frozenset({"", "index.html", "index.htm"})
UPGRADE_PATH = "/"
DEFAULT_CONTENT_TYPE = "text/plain"
NOT_FOUND_BODY = b"404 Not Found\n"

# Extension overrides; anything else maps to text/<ext>
CONTENT_TYPE_OVERRIDES = {
    "js": "application/javascript",
    "txt": "text/plain",
    "gif": "image/gif",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "pdf": "application/pdf",
    "zip": "application/zip",
    "mp3": "audio/mpeg",
    "wav": "audio/x-wav",
}

__all__ = [
    "ENCODING",
    "INDEX_FILE",
    "INDEX_ALIASES",
    "UPGRADE_PATH",
    "DEFAULT_CONTENT_TYPE",
    "NOT_FOUND_BODY",
    "CONTENT_TYPE_OVERRIDES",
]
