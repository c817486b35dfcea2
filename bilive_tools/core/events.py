"""
简单的发布/订阅通道

facade 通过它发布 `log` 事件（格式化后的日志行），并订阅宿主程序发出的
`systemMSG` 事件（payload 形如 {"message": "..."}）。
"""
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger("BiliveTools.Core.Events")

EVENT_LOG = "log"
EVENT_SYSTEM_MESSAGE = "systemMSG"

Listener = Callable[..., Any]


class EventBus:
    """Synchronous listener registry. Listeners run in registration order."""

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> Listener:
        self._listeners[event].append(listener)
        return listener

    def off(self, event: str, listener: Listener) -> None:
        listeners = self._listeners.get(event)
        if not listeners:
            return
        try:
            listeners.remove(listener)
        except ValueError:
            logger.debug(f"off(): listener not registered for '{event}'")
        if not listeners:
            del self._listeners[event]

    def emit(self, event: str, *args: Any) -> bool:
        # 复制一份，允许监听器在回调中取消订阅
        listeners = list(self._listeners.get(event, ()))
        for listener in listeners:
            listener(*args)
        return bool(listeners)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))
