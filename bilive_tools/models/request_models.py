from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar, Union

import httpx
from pydantic import BaseModel, Field


class Platform(str, Enum):
    PC = "PC"
    ANDROID = "Android"
    WEBVIEW = "WebView"


class ResponseType(str, Enum):
    TEXT = "text"
    BUFFER = "buffer"
    JSON = "json"


class _CommonRequestFields(BaseModel):
    method: Optional[str] = None
    headers: Optional[Dict[str, Any]] = None
    encoding: Optional[str] = None
    body: Optional[Union[str, bytes]] = None
    form: Optional[Dict[str, Any]] = None
    search_params: Optional[Union[str, Dict[str, Any]]] = Field(None, alias="searchParams")
    # 秒；旧版 mapping 形式传入的毫秒值在 normalize_options 中换算
    timeout: Optional[float] = None
    model_config = {"populate_by_name": True, "extra": "allow", "arbitrary_types_allowed": True}


class RequestOptions(_CommonRequestFields):
    """Canonical request description consumed by the executor."""
    url: str
    response_type: ResponseType = Field(ResponseType.TEXT, alias="responseType")
    cookie_jar: Optional[httpx.Cookies] = Field(None, alias="cookieJar")
    # JSON request body
    json_body: Any = Field(None, alias="json")


class LegacyRequestOptions(_CommonRequestFields):
    """
    旧版插件使用的请求参数形状：
      - uri 代替 url
      - jar 代替 cookieJar
      - encoding: None 表示需要原始字节
      - json: True 表示按 JSON 解析响应；其它值是 JSON 请求体
    """
    url: Optional[str] = None
    uri: Optional[str] = None
    cookie_jar: Optional[httpx.Cookies] = Field(None, alias="cookieJar")
    jar: Optional[httpx.Cookies] = None
    response_type: Optional[ResponseType] = Field(None, alias="responseType")
    json_field: Any = Field(None, alias="json")


class ErrorKind(str, Enum):
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    PARSE = "parse"
    OPTIONS = "options"


@dataclass
class RequestResult:
    response: httpx.Response
    body: Any


T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]


def value_or_none(result: "Result[T]") -> Optional[T]:
    return result.value if isinstance(result, Ok) else None
