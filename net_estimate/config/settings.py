"""
全局系统设置

定义系统级配置参数和默认值。
"""

import os
from typing import Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field

from ..utils.units import PROPAGATION_SPEED_ACTUAL

ENV_PREFIX = "NET_ESTIMATE_"


class Settings(BaseModel):
    """系统设置类"""

    model_config = ConfigDict(allow_inf_nan=False)

    # 日志配置
    log_level: str = Field(default="INFO", description="日志级别")
    log_file: Optional[str] = Field(default=None, description="日志文件路径")

    # 输出配置
    default_output_format: str = Field(default="table", description="默认输出格式")
    format_max_int_digits: int = Field(default=3, ge=1, description="十进制格式化整数部分最大位数")
    format_dec_digits: int = Field(default=2, ge=0, description="格式化小数位数")
    ibi_max_int_digits: int = Field(default=2, ge=1, description="二进制格式化整数部分最大位数")

    # 时延模型配置
    propagation_speed_mps: float = Field(default=PROPAGATION_SPEED_ACTUAL, gt=0,
                                         description="信号传播速度(m/s)")
    default_arrival_rate_pps: float = Field(default=40.0, ge=0, description="默认到达率λ(pkt/s)")

    # 采样配置
    sample_duration_s: float = Field(default=1.0, gt=0, description="单次采样时长(秒)")
    monitor_interval_s: float = Field(default=1.0, gt=0, description="持续采样间隔(秒)")


def _env_overrides(environ: Dict[str, str]) -> Dict[str, Any]:
    """收集 NET_ESTIMATE_<字段名> 形式的环境变量"""
    overrides = {}
    for name in Settings.model_fields:
        key = ENV_PREFIX + name.upper()
        if key in environ:
            overrides[name] = environ[key]
    return overrides


class ConfigManager:
    """配置管理器"""

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self._settings: Optional[Settings] = None
        self._environ = environ

    def get_settings(self) -> Settings:
        """获取设置实例（每个管理器一个实例）"""
        if self._settings is None:
            environ = os.environ if self._environ is None else self._environ
            self._settings = Settings(**_env_overrides(environ))
        return self._settings

    def update_settings(self, **kwargs) -> None:
        """更新设置"""
        current = self.get_settings().model_dump()
        for key, value in kwargs.items():
            if key not in current:
                raise ValueError(f"Unknown setting: {key}")
            current[key] = value
        self._settings = Settings(**current)

    def reset(self) -> None:
        """丢弃已加载的设置"""
        self._settings = None


# 全局配置管理器实例
config_manager = ConfigManager()


def get_settings() -> Settings:
    """获取全局设置"""
    return config_manager.get_settings()
