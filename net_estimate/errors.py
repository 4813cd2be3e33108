"""
异常定义

过载（λ ≥ μ）不是异常，而是以正无穷表示。
"""


class NetEstimateError(Exception):
    """net_estimate所有异常的基类"""


class EmptyWorkloadError(NetEstimateError, ValueError):
    """包数量不为正，无法计算窗口指标"""


class NoTrafficError(NetEstimateError, ZeroDivisionError):
    """采样区间内没有观察到任何数据包"""


class CounterReadError(NetEstimateError, OSError):
    """读取操作系统网络计数器失败"""


class FrameNotFoundError(NetEstimateError, LookupError):
    """传输窗口中不存在指定标签的帧"""
