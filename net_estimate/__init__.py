"""
Net-Estimate: 链路性能估算工具

结合传输/传播时延、RTT、M/M/1排队模型与持久/非持久连接服务时间等闭式公式，
以及对操作系统网络I/O计数器的实时采样，给出可比较、可读的链路性能估算。
"""

from loguru import logger

__version__ = "0.1.0"

from .errors import (
    NetEstimateError,
    EmptyWorkloadError,
    NoTrafficError,
    CounterReadError,
    FrameNotFoundError,
)
from .models import ServiceParams, CounterSnapshot, Frame, TransmissionWindow, NetworkMetrics
from .estimator import NetworkEstimator, compute_metrics, compute_utilization
from .sampling import filter_io_counters, new_frame, populate_frame, ContinuousSampler
from .utils.formatters import format_bits, format_bits_ibi

# 库默认不输出日志，由调用方通过 setup_logging 启用
logger.disable("net_estimate")

__all__ = [
    "NetEstimateError",
    "EmptyWorkloadError",
    "NoTrafficError",
    "CounterReadError",
    "FrameNotFoundError",
    "ServiceParams",
    "CounterSnapshot",
    "Frame",
    "TransmissionWindow",
    "NetworkMetrics",
    "NetworkEstimator",
    "compute_metrics",
    "compute_utilization",
    "filter_io_counters",
    "new_frame",
    "populate_frame",
    "ContinuousSampler",
    "format_bits",
    "format_bits_ibi",
]
