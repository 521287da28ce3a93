from .client import ApiClient, encode_grant
from .models import ApiData, ApiResponse

__all__ = ["ApiClient", "ApiData", "ApiResponse", "encode_grant"]
