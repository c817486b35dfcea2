"""bilive-tools: request helpers shared by the live-room client."""

from .core.errors import BiliveToolsError, HookNotConfiguredError
from .core.events import EVENT_LOG, EVENT_SYSTEM_MESSAGE, EventBus
from .core.logging_utils import LogSink
from .models.request_models import (
    Err,
    ErrorKind,
    LegacyRequestOptions,
    Ok,
    Platform,
    RequestOptions,
    RequestResult,
    ResponseType,
)
from .services.facade import RequestFacade

__all__ = [
    "BiliveToolsError",
    "HookNotConfiguredError",
    "EVENT_LOG",
    "EVENT_SYSTEM_MESSAGE",
    "EventBus",
    "LogSink",
    "Err",
    "ErrorKind",
    "LegacyRequestOptions",
    "Ok",
    "Platform",
    "RequestOptions",
    "RequestResult",
    "ResponseType",
    "RequestFacade",
]
