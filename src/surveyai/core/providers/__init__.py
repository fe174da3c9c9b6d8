from surveyai.core.providers.base import (
    Message,
    ProviderAdapter,
    ProviderResult,
    ProviderStatus,
    RequestOptions,
    Role,
)
from surveyai.core.providers.router import FailoverRouter

__all__ = [
    "FailoverRouter",
    "Message",
    "ProviderAdapter",
    "ProviderResult",
    "ProviderStatus",
    "RequestOptions",
    "Role",
]
