"""
一些工具, 供全局调用

RequestFacade 在进程启动时创建一次，通过引用传给需要它的组件；
关闭时（aclose）取消事件订阅、丢弃内存日志并关闭自己创建的 HTTP 客户端。
"""
import logging
from typing import Any, Awaitable, Callable, List, Optional, Union

import httpx
import orjson

from ..core.config import API_LIVE_ORIGIN
from ..core.errors import HookNotConfiguredError
from ..core.events import EVENT_SYSTEM_MESSAGE, EventBus
from ..core.http_client import close_http_client, create_http_client
from ..core.logging_utils import LogSink
from ..models.request_models import Err, ErrorKind, Ok, Platform, RequestResult, Result, value_or_none
from ..utils import helpers
from .cookies import get_cookie, set_cookie
from .requests import RequestExecutor, headers_for
from .requests.normalizer import AnyRequestOptions

logger = logging.getLogger("BiliveTools.Facade")


class RequestFacade:
    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        events: Optional[EventBus] = None,
        sink: Optional[LogSink] = None,
    ):
        self.events = events if events is not None else EventBus()
        self.sink = sink if sink is not None else LogSink(self.events)
        self._owns_client = client is None
        self.client = client if client is not None else create_http_client()
        self.executor = RequestExecutor(self.client, self.sink)

        # 宿主程序注入的集成回调
        self.send_sc_msg_hook: Optional[Callable[[str], None]] = None
        self.captcha_hook: Optional[Callable[[str], Awaitable[str]]] = None

        self.events.on(EVENT_SYSTEM_MESSAGE, self._on_system_message)

    async def __aenter__(self) -> "RequestFacade":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        self.events.off(EVENT_SYSTEM_MESSAGE, self._on_system_message)
        self.sink.clear()
        if self._owns_client:
            await close_http_client(self.client)
        logger.info("RequestFacade closed")

    def _on_system_message(self, data) -> None:
        self.log(data["message"])

    # ---- requests ----

    def get_headers(self, platform: Union[Platform, str] = Platform.PC):
        return headers_for(platform)

    async def xhr(
        self,
        options: AnyRequestOptions,
        platform: Union[Platform, str] = Platform.PC,
    ) -> Optional[RequestResult]:
        """发送请求；失败时已经写入错误日志，返回 None"""
        return await self.executor.execute(options, platform)

    async def xhr_result(
        self,
        options: AnyRequestOptions,
        platform: Union[Platform, str] = Platform.PC,
    ) -> Result[RequestResult]:
        return await self.executor.execute_result(options, platform)

    # ---- cookies ----

    def get_cookie(self, jar: httpx.Cookies, key: str, url: str = API_LIVE_ORIGIN) -> str:
        return get_cookie(jar, key, url)

    def set_cookie(self, cookie_string: str) -> httpx.Cookies:
        return set_cookie(cookie_string)

    # ---- helpers ----

    async def parse_json_result(self, text: Union[str, bytes], reviver: Optional[helpers.Reviver] = None) -> Result[Any]:
        try:
            return Ok(helpers.loads_json(text, reviver))
        except orjson.JSONDecodeError as e:
            self.error_log("JSONparse", e)
            return Err(kind=ErrorKind.PARSE, message=str(e), error=e)

    async def parse_json(self, text: Union[str, bytes], reviver: Optional[helpers.Reviver] = None) -> Optional[Any]:
        """格式化JSON，解析失败返回 None"""
        return value_or_none(await self.parse_json_result(text, reviver))

    def hash(self, algorithm: str, data: Union[str, bytes]) -> str:
        return helpers.hash_hex(algorithm, data)

    def date(self) -> str:
        return helpers.now_string()

    async def sleep(self, ms: float) -> str:
        return await helpers.sleep(ms)

    # ---- logging ----

    def log(self, *message: Any) -> None:
        self.sink.info(*message)

    def error_log(self, *message: Any) -> None:
        self.sink.error(*message)

    @property
    def logs(self) -> List[str]:
        return self.sink.lines

    # ---- integration hooks ----

    def send_sc_msg(self, message: str) -> None:
        if self.send_sc_msg_hook is None:
            raise HookNotConfiguredError("send_sc_msg")
        self.send_sc_msg_hook(message)

    async def captcha(self, captcha_jpeg: str) -> str:
        """验证码识别，由宿主程序注入实现"""
        if self.captcha_hook is None:
            raise HookNotConfiguredError("captcha")
        return await self.captcha_hook(captcha_jpeg)
