import asyncio
import hashlib
from datetime import datetime
from typing import Any, Callable, Optional, Union

import orjson

from ..core.config import LOG_DATE_FORMAT

SLEEP_SENTINEL = "sleep"

Reviver = Callable[[Any, Any], Any]


class _Omit:
    def __repr__(self):
        return "OMIT"


# reviver 返回 OMIT 时删除该键（列表中的元素置为 None）
OMIT = _Omit()


def now_string() -> str:
    """当前本地时间，固定 19 个字符"""
    return datetime.now().strftime(LOG_DATE_FORMAT)


def hash_hex(algorithm: str, data: Union[str, bytes]) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.new(algorithm, data).hexdigest()


def loads_json(text: Union[str, bytes], reviver: Optional[Reviver] = None) -> Any:
    """
    严格解析 JSON，失败时抛出 orjson.JSONDecodeError。

    reviver(key, value) 与 JSON.parse 的 reviver 语义一致：自底向上调用，
    根节点的 key 为空字符串，返回值替换原值。
    """
    obj = orjson.loads(text)
    if reviver is None:
        return obj
    return _revive({"": obj}, "", reviver)


def _revive(holder, key, reviver: Reviver) -> Any:
    value = holder[key]
    if isinstance(value, dict):
        for k in list(value):
            revived = _revive(value, k, reviver)
            if revived is OMIT:
                del value[k]
            else:
                value[k] = revived
    elif isinstance(value, list):
        for i in range(len(value)):
            revived = _revive(value, i, reviver)
            value[i] = None if revived is OMIT else revived
    return reviver(key, value)


async def sleep(ms: float) -> str:
    await asyncio.sleep(ms / 1000)
    return SLEEP_SENTINEL
