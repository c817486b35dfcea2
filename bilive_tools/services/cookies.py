"""
Cookie 读写

存储、域名/路径匹配都交给 httpx.Cookies（底层是 http.cookiejar），
这里只做单值读取和从 cookie 字符串构建新的 jar。
"""
import logging

import httpx

from ..core.config import API_LIVE_ORIGIN, COOKIE_DOMAIN, COOKIE_URL

logger = logging.getLogger("BiliveTools.Cookies")


def cookie_header_for(jar: httpx.Cookies, url: str) -> str:
    """返回 jar 对该 url 会发送的 Cookie 头，没有则为空字符串"""
    request = httpx.Request("GET", url)
    jar.set_cookie_header(request)
    return request.headers.get("Cookie", "")


def get_cookie(jar: httpx.Cookies, key: str, url: str = API_LIVE_ORIGIN) -> str:
    """
    获取 cookie 值

    按 jar 的匹配规则取出对 url 可见的 cookie，返回第一个名字完全一致的值，
    找不到时返回空字符串
    """
    header = cookie_header_for(jar, url)
    for pair in header.split("; "):
        name, sep, value = pair.partition("=")
        if sep and name == key:
            return value
    return ""


def set_cookie(cookie_string: str) -> httpx.Cookies:
    """
    由 "a=1; b=2" 形式的字符串构建新的 cookie jar

    每一项都以 Domain=COOKIE_DOMAIN; Path=/ 交给 cookiejar 自己的 Set-Cookie
    解析器处理，不做预校验
    """
    jar = httpx.Cookies()
    if cookie_string == "":
        return jar
    set_cookie_headers = [
        ("Set-Cookie", f"{cookie}; Domain={COOKIE_DOMAIN}; Path=/")
        for cookie in cookie_string.split(";")
    ]
    response = httpx.Response(200, headers=set_cookie_headers, request=httpx.Request("GET", COOKIE_URL))
    jar.extract_cookies(response)
    logger.debug(f"Built cookie jar with {len(jar.jar)} cookie(s) from {len(set_cookie_headers)} pair(s)")
    return jar
