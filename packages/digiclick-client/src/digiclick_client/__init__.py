"""DigiClick API client: rate-limited, cached, retrying HTTP calls."""

from digiclick_client.client import ResilientFetchClient
from digiclick_client.config import Settings, get_settings
from digiclick_client.endpoints import DigiClickApi
from digiclick_client.schemas.result import ApiFailure, ApiResult, ApiSuccess

__version__ = "0.1.0"

__all__ = [
    "ApiFailure",
    "ApiResult",
    "ApiSuccess",
    "DigiClickApi",
    "ResilientFetchClient",
    "Settings",
    "get_settings",
]
