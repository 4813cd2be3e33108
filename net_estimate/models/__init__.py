"""
数据模型模块

定义链路参数、计数器快照、测量帧与传输窗口。
"""

from .params import ServiceParams
from .counters import CounterSnapshot
from .frame import Frame
from .window import TransmissionWindow, NetworkMetrics

__all__ = [
    "ServiceParams",
    "CounterSnapshot",
    "Frame",
    "TransmissionWindow",
    "NetworkMetrics",
]
