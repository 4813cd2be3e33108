"""
工具模块

提供单位常量、数据格式化与日志配置。
"""

from .formatters import format_bits, format_bits_ibi, format_b, format_bibi, format_results
from .logging import setup_logging

__all__ = [
    "format_bits",
    "format_bits_ibi",
    "format_b",
    "format_bibi",
    "format_results",
    "setup_logging",
]
