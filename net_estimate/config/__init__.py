"""
全局配置模块

管理系统级的全局配置和设置。
"""

from .settings import Settings, ConfigManager, get_settings

__all__ = ["Settings", "ConfigManager", "get_settings"]
