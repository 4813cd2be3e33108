"""
流量采样模块

读取操作系统网络计数器并生成测量帧。
"""

from .counters import CounterSource, PsutilCounterSource, filter_io_counters
from .sampler import read_snapshot, new_frame, populate_frame, ContinuousSampler

__all__ = [
    "CounterSource",
    "PsutilCounterSource",
    "filter_io_counters",
    "read_snapshot",
    "new_frame",
    "populate_frame",
    "ContinuousSampler",
]
