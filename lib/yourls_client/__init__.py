from .client import YourlsClient
from .config_types import ClientConfig, PasswordAuth, SignatureAuth
from .errors import (
    ApiError,
    DecodeError,
    HttpStatusError,
    MalformedResponseError,
    TransportError,
    YourlsClientError,
)

__all__ = [
    "YourlsClient",
    "ClientConfig",
    "PasswordAuth",
    "SignatureAuth",
    "YourlsClientError",
    "TransportError",
    "HttpStatusError",
    "DecodeError",
    "ApiError",
    "MalformedResponseError",
]
