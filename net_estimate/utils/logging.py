"""
日志配置

基于loguru，库默认静默，由调用方（CLI或应用）显式启用。
"""

import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    配置日志输出并启用net_estimate包的日志

    Args:
        level: 日志级别
        log_file: 可选的日志文件路径
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT, catch=True)
    if log_file:
        logger.add(log_file, level=level.upper(), catch=True, enqueue=True)
    logger.enable("net_estimate")
