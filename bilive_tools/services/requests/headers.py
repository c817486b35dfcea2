"""
Header presets for outgoing requests.

Each platform simulates a different client: a desktop browser (default), the
Android app, or the embedded WebView inside the Android app.
"""

from __future__ import annotations

from typing import Dict, Union

from ...models.request_models import Platform

LIVE_ORIGIN = "https://live.bilibili.com"

_ANDROID_HEADERS: Dict[str, str] = {
    "Connection": "Keep-Alive",
    "User-Agent": "Mozilla/5.0 BiliDroid/5.43.1 (bbcallen@gmail.com)",
}

_WEBVIEW_HEADERS: Dict[str, str] = {
    "Accept": "application/json, text/javascript, */*",
    "Accept-Language": "zh-CN",
    "Connection": "keep-alive",
    # 占位 cookie，请求携带 cookie jar 时会被替换
    "Cookie": "l=v",
    "Origin": LIVE_ORIGIN,
    "User-Agent": "Mozilla/5.0 (Linux; Android 8.0.0; G8142 Build/47.1.A.12.270; wv) AppleWebKit/537.36 "
                  "(KHTML, like Gecko) Chrome/68.0.3440.91 Mobile Safari/537.36 BiliApp/5300000",
    "X-Requested-With": "tv.danmaku.bili",
}

_PC_HEADERS: Dict[str, str] = {
    "Accept": "application/json, text/javascript, */*",
    "Accept-Language": "zh-CN",
    "Connection": "keep-alive",
    "Cookie": "l=v",
    "DNT": "1",
    "Origin": LIVE_ORIGIN,
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
                  "(KHTML, like Gecko) Chrome/68.0.3440.106 Safari/537.36",
}

_PRESETS: Dict[str, Dict[str, str]] = {
    Platform.ANDROID.value: _ANDROID_HEADERS,
    Platform.WEBVIEW.value: _WEBVIEW_HEADERS,
}


def headers_for(platform: Union[Platform, str, None] = Platform.PC) -> Dict[str, str]:
    """
    Build the header set for a platform.

    Always returns a new dict. `Android` and `WebView` get their own presets;
    `PC` and any other value (including empty or unknown strings) fall back to
    the desktop browser preset.
    """
    if isinstance(platform, Platform):
        platform = platform.value
    return dict(_PRESETS.get(platform, _PC_HEADERS))
