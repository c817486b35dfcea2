import os
from dotenv import load_dotenv

load_dotenv()

APP_VERSION = os.getenv("APP_VERSION", "1.4.0")

LOG_LEVEL_FROM_ENV = os.getenv("LOG_LEVEL", "INFO").upper()
# 内存日志尾部保留的行数
LOG_BUFFER_CAPACITY = int(os.getenv("LOG_BUFFER_CAPACITY", "500"))
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 直播 API 源站，读取 cookie 时的默认 URL
API_LIVE_ORIGIN = os.getenv("API_LIVE_ORIGIN", "https://api.live.bilibili.com")
# 写入 cookie 时统一使用的作用域
COOKIE_DOMAIN = os.getenv("COOKIE_DOMAIN", "bilibili.com")
COOKIE_URL = os.getenv("COOKIE_URL", "https://bilibili.com")

REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30.0"))
CONNECT_TIMEOUT = float(os.getenv("CONNECT_TIMEOUT", "10.0"))
MAX_CONNECTIONS = int(os.getenv("MAX_CONNECTIONS", "100"))
HTTP2_ENABLED = os.getenv("HTTP2_ENABLED", "true").lower() == "true"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=UTF-8"
