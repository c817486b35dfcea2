import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from .core.config import APP_VERSION, LOG_LEVEL_FROM_ENV
from .core.http_client import close_http_client, create_http_client
from .services.facade import RequestFacade

logger = logging.getLogger("BiliveTools.Main")

_CONSOLE_FORMAT = '%(asctime)s %(levelname)-8s [%(name)s:%(module)s:%(lineno)d] - %(message)s'

# 由 configure_logging 安装到根日志记录器的控制台处理器
_console_handler: Optional[logging.Handler] = None


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """配置根日志记录器（控制台处理器），只添加一次"""
    numeric_log_level = getattr(logging, (level or LOG_LEVEL_FROM_ENV).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_log_level)

    global _console_handler
    if _console_handler is None:
        _console_handler = logging.StreamHandler()
        _console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    if _console_handler not in root_logger.handlers:
        root_logger.addHandler(_console_handler)

    for lib_logger_name in ["httpx", "httpcore", "hpack"]:
        logging.getLogger(lib_logger_name).setLevel(logging.WARNING)
    return root_logger


@asynccontextmanager
async def lifespan(transport: Optional[httpx.AsyncBaseTransport] = None) -> AsyncIterator[RequestFacade]:
    """
    进程级生命周期：启动时创建唯一的 RequestFacade，退出时关闭它
    """
    configure_logging()
    logger.info(f"Lifespan: starting bilive-tools {APP_VERSION}")
    facade = RequestFacade(create_http_client(transport))
    try:
        yield facade
    finally:
        logger.info("Lifespan: shutting down, closing facade...")
        await facade.aclose()
        await close_http_client(facade.client)
        logger.info("Lifespan: shutdown complete")
