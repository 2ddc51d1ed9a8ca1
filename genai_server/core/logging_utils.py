import logging
from typing import Optional

from .config import LOG_LEVEL_FROM_ENV

ROOT_LOGGER_NAME = "GenAIServer"

LOG_FORMAT = '%(asctime)s %(levelname)-8s [%(name)s:%(module)s:%(lineno)d] - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    配置 GenAIServer 日志记录器
    - 控制台处理器只添加一次
    - 未指定 level 时使用 LOG_LEVEL 环境变量
    - httpx / httpcore 降为 WARNING，避免请求 URL 中的敏感信息刷屏
    """
    global _console_handler

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    level_name = (level or LOG_LEVEL_FROM_ENV).upper()
    package_logger.setLevel(getattr(logging, level_name, logging.INFO))

    if _console_handler is None:
        _console_handler = logging.StreamHandler()
        _console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        package_logger.addHandler(_console_handler)

    for lib_logger_name in ["httpx", "httpcore"]:
        logging.getLogger(lib_logger_name).setLevel(logging.WARNING)

    return package_logger


def mask_api_key(api_key: str) -> str:
    """Return a masked/fingerprinted representation of an API key for safe logging."""
    if not api_key:
        return "(empty)"
    if len(api_key) <= 8:
        return f"****...**** (len={len(api_key)})"
    return f"{api_key[:4]}...{api_key[-4:]} (len={len(api_key)})"
