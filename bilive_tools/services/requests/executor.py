"""
Request execution.

Normalizes options, applies the platform header preset and sends the request
through the shared httpx client. Failures never propagate: bad options and
transport errors alike are written to the error log and returned as `Err`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

import httpx
import orjson
from pydantic import ValidationError

from ...core.config import FORM_CONTENT_TYPE
from ...core.http_client import refuse_client_cookies
from ...core.logging_utils import LogSink
from ...models.request_models import (
    Err,
    ErrorKind,
    Ok,
    Platform,
    RequestOptions,
    RequestResult,
    ResponseType,
    Result,
    value_or_none,
)
from ..cookies import cookie_header_for
from .headers import headers_for
from .normalizer import AnyRequestOptions, normalize_options

logger = logging.getLogger("BiliveTools.Requests.Executor")

# 允许透传给 httpx 的额外参数
TRANSPORT_PASSTHROUGH = ("files", "auth", "follow_redirects", "extensions")


def merge_headers(options: RequestOptions, platform: Union[Platform, str]) -> Dict[str, str]:
    """Preset headers for `platform`, overridden by the caller's own headers."""
    headers = headers_for(platform)
    for name, value in (options.headers or {}).items():
        if value is None:
            continue
        headers[name] = value if isinstance(value, (str, bytes)) else str(value)
    method = (options.method or "").upper()
    if method == "POST" and not any(name.lower() == "content-type" for name in headers):
        headers["Content-Type"] = FORM_CONTENT_TYPE
    return headers


def passthrough_options(options: RequestOptions) -> Dict[str, Any]:
    extra = options.model_extra or {}
    ignored = sorted(set(extra) - set(TRANSPORT_PASSTHROUGH))
    if ignored:
        logger.debug(f"Ignoring request options not understood by the transport: {ignored}")
    return {name: extra[name] for name in TRANSPORT_PASSTHROUGH if name in extra}


def target_of(options: Any) -> str:
    """错误日志里的请求目标；没有 url 时只列出字段名，不输出字段值"""
    if isinstance(options, Mapping):
        url = options.get("url") or options.get("uri")
        keys = sorted(str(key) for key in options)
    else:
        url = getattr(options, "url", None) or getattr(options, "uri", None)
        keys = sorted(getattr(options, "model_fields_set", ()))
    return str(url) if url else f"<no url, options: {keys}>"


def apply_cookies(request: httpx.Request, jar: Optional[httpx.Cookies], preset_cookie: Optional[str]) -> None:
    """jar 里有对应 cookie 时覆盖预设的占位 Cookie，否则保留预设值"""
    cookie = preset_cookie
    if jar is not None:
        cookie = cookie_header_for(jar, str(request.url)) or preset_cookie
    if cookie:
        request.headers["Cookie"] = cookie


def decode_body(response: httpx.Response, options: RequestOptions) -> Any:
    if options.response_type == ResponseType.BUFFER:
        return response.content
    if options.response_type == ResponseType.JSON:
        if not response.content:
            return ""
        return orjson.loads(response.content)
    if options.encoding:
        response.encoding = options.encoding
    return response.text


class RequestExecutor:
    """
    Sends requests for many accounts over one shared client.

    The client never keeps response cookies (`refuse_client_cookies`). Each
    request's cookies live in its own jar, applied and updated on every
    redirect hop.
    """

    def __init__(self, client: httpx.AsyncClient, sink: LogSink):
        self.client = refuse_client_cookies(client)
        self.sink = sink

    def build_request(
        self,
        options: RequestOptions,
        headers: Dict[str, str],
        passthrough: Optional[Dict[str, Any]] = None,
    ) -> httpx.Request:
        passthrough = passthrough or {}
        return self.client.build_request(
            options.method or "GET",
            options.url,
            headers=headers,
            content=options.body,
            data=options.form,
            json=options.json_body,
            params=options.search_params,
            files=passthrough.get("files"),
            extensions=passthrough.get("extensions"),
            timeout=options.timeout if options.timeout is not None else httpx.USE_CLIENT_DEFAULT,
        )

    async def send(
        self,
        request: httpx.Request,
        jar: Optional[httpx.Cookies],
        preset_cookie: Optional[str] = None,
        passthrough: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """
        Send `request`, following redirects one hop at a time.

        Every response is extracted into `jar`. Every hop gets the jar's
        cookies for its own URL, or `preset_cookie` when the jar has none.
        """
        passthrough = passthrough or {}
        follow = passthrough.get("follow_redirects", self.client.follow_redirects)
        auth = passthrough.get("auth", httpx.USE_CLIENT_DEFAULT)
        history: List[httpx.Response] = []

        apply_cookies(request, jar, preset_cookie)
        while True:
            response = await self.client.send(request, auth=auth, follow_redirects=False)
            if jar is not None:
                jar.extract_cookies(response)
            if not follow or response.next_request is None:
                response.history = history
                return response
            if len(history) >= self.client.max_redirects:
                raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=request)
            history.append(response)
            logger.debug(
                f"{response.status_code} redirect {len(history)}/{self.client.max_redirects}: "
                f"{request.url} -> {response.next_request.url}"
            )
            request = response.next_request
            apply_cookies(request, jar, preset_cookie)
            # auth 流程只在第一次请求上运行，同源跳转沿用 httpx 保留的 Authorization 头
            auth = None

    async def execute_result(
        self,
        options: AnyRequestOptions,
        platform: Union[Platform, str] = Platform.PC,
    ) -> Result[RequestResult]:
        url = target_of(options)
        try:
            canonical = normalize_options(options)
            passthrough = passthrough_options(canonical)
            headers = merge_headers(canonical, platform)
            preset_cookie = next((value for name, value in headers.items() if name.lower() == "cookie"), None)
            request = self.build_request(canonical, headers, passthrough)
            response = await self.send(request, canonical.cookie_jar, preset_cookie, passthrough)
            response.raise_for_status()
            body = decode_body(response, canonical)
        except ValidationError as e:
            return self._fail(url, ErrorKind.OPTIONS, e)
        except httpx.TimeoutException as e:
            return self._fail(url, ErrorKind.TIMEOUT, e)
        except httpx.HTTPStatusError as e:
            return self._fail(url, ErrorKind.HTTP_STATUS, e)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return self._fail(url, ErrorKind.TRANSPORT, e)
        except orjson.JSONDecodeError as e:
            return self._fail(url, ErrorKind.PARSE, e)
        return Ok(RequestResult(response=response, body=body))

    async def execute(
        self,
        options: AnyRequestOptions,
        platform: Union[Platform, str] = Platform.PC,
    ) -> Optional[RequestResult]:
        return value_or_none(await self.execute_result(options, platform))

    def _fail(self, url: str, kind: ErrorKind, error: Exception) -> Err:
        self.sink.error(url, error)
        logger.debug(f"Request to {url} failed ({kind.value}): {error!r}")
        return Err(kind=kind, message=str(error) or type(error).__name__, error=error)
