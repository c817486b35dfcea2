"""
HTTP 客户端管理模块
创建 facade 使用的 httpx.AsyncClient，并负责在关闭时释放连接池
"""
import http.cookiejar
import logging
import httpx
from typing import Optional

from .config import CONNECT_TIMEOUT, HTTP2_ENABLED, MAX_CONNECTIONS, REQUEST_TIMEOUT

logger = logging.getLogger("BiliveTools.Core.HTTPClient")


class RefuseAllCookiesPolicy(http.cookiejar.DefaultCookiePolicy):
    """拒绝保存任何响应 cookie 的策略，cookie 只存放在调用方传入的 jar 中"""

    def set_ok(self, cookie, request):
        return False


def refuse_client_cookies(client: httpx.AsyncClient) -> httpx.AsyncClient:
    """
    让共享客户端不再保存响应 cookie

    多个账号共用一个客户端，客户端自己的 jar 必须始终为空；
    已有的 cookie 不动，只替换保存策略
    """
    client.cookies.jar.set_policy(RefuseAllCookiesPolicy())
    return client


def create_http_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """
    创建 HTTP 客户端

    配置说明：
    - limits: 连接池限制
    - timeout: 总超时 REQUEST_TIMEOUT，连接阶段 CONNECT_TIMEOUT
    - follow_redirects: 自动跟随重定向
    - cookies: 不保存响应 cookie，见 refuse_client_cookies
    - http2: 由 HTTP2_ENABLED 控制；传入自定义 transport 时不生效
    """
    logger.info(
        f"Initializing HTTP client. Timeout: {REQUEST_TIMEOUT}s, Connect: {CONNECT_TIMEOUT}s, "
        f"Max Connections: {MAX_CONNECTIONS}, HTTP/2: {HTTP2_ENABLED}"
    )
    client = httpx.AsyncClient(
        limits=httpx.Limits(
            max_connections=MAX_CONNECTIONS,
            max_keepalive_connections=20,
            keepalive_expiry=60.0,
        ),
        timeout=httpx.Timeout(REQUEST_TIMEOUT, connect=CONNECT_TIMEOUT),
        follow_redirects=True,
        http2=HTTP2_ENABLED and transport is None,
        transport=transport,
    )
    return refuse_client_cookies(client)


async def close_http_client(client: Optional[httpx.AsyncClient]) -> None:
    """
    关闭 HTTP 客户端（facade 关闭时调用）
    """
    if client is None:
        return
    if client.is_closed:
        logger.info("HTTP client already closed")
        return
    logger.info("Closing HTTP client")
    await client.aclose()
