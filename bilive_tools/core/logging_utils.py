import logging
import collections
import sys
from typing import Any, List, Optional

from .config import LOG_BUFFER_CAPACITY, LOG_DATE_FORMAT
from .events import EVENT_LOG, EventBus

LINE_FORMAT = "%(asctime)s : %(message)s"


class MemoryLogHandler(logging.Handler):
    """
    将日志记录到内存中的 Handler，只保留最近 capacity 行
    """
    def __init__(self, capacity=LOG_BUFFER_CAPACITY):
        super().__init__()
        # deque 满了以后 append 会先丢弃最旧的一行，长度永远不超过 capacity
        self.log_buffer = collections.deque(maxlen=capacity)

    def emit(self, record):
        try:
            self.log_buffer.append(self.format(record))
        except Exception:
            self.handleError(record)

    def get_logs(self, limit=100):
        """获取最近的日志"""
        return list(self.log_buffer)[-limit:]

    def clear(self):
        with self.lock:
            self.log_buffer.clear()


class EventForwardHandler(logging.Handler):
    """把每一行格式化后的日志作为事件发布出去"""
    def __init__(self, events: EventBus, event: str = EVENT_LOG):
        super().__init__()
        self.events = events
        self.event = event

    def emit(self, record):
        try:
            self.events.emit(self.event, self.format(record))
        except Exception:
            self.handleError(record)


class BelowErrorFilter(logging.Filter):
    def filter(self, record):
        return record.levelno < logging.ERROR


def format_parts(parts) -> str:
    pieces = []
    for part in parts:
        if isinstance(part, BaseException):
            pieces.append(f"{type(part).__name__}: {part}")
        else:
            pieces.append(str(part))
    return " ".join(pieces)


class LogSink:
    """
    带时间戳的日志输出。

    info 行写入内存尾部、发布 `log` 事件并打印到 stdout；
    error 行只打印到 stderr，不进入内存尾部也不发布事件。
    每个 sink 使用独立的 Logger 实例，不挂在 logging 的全局层级下。
    """

    def __init__(
        self,
        events: Optional[EventBus] = None,
        capacity: int = LOG_BUFFER_CAPACITY,
        name: str = "BiliveTools.LogSink",
    ):
        self.events = events if events is not None else EventBus()
        self._logger = logging.Logger(name, logging.DEBUG)

        formatter = logging.Formatter(LINE_FORMAT, datefmt=LOG_DATE_FORMAT)
        below_error = BelowErrorFilter()

        self.memory_handler = MemoryLogHandler(capacity)
        self.event_handler = EventForwardHandler(self.events)
        stdout_handler = logging.StreamHandler(sys.stdout)
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.ERROR)

        for handler in (self.memory_handler, self.event_handler, stdout_handler):
            handler.addFilter(below_error)
        for handler in (self.memory_handler, self.event_handler, stdout_handler, stderr_handler):
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    def info(self, *parts: Any) -> None:
        self._logger.info(format_parts(parts))

    def error(self, *parts: Any) -> None:
        self._logger.error(format_parts(parts))

    @property
    def lines(self) -> List[str]:
        return list(self.memory_handler.log_buffer)

    def clear(self) -> None:
        self.memory_handler.clear()
