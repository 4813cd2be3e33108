"""
估算引擎模块

提供时延模型公式、传输窗口指标计算与利用率汇总。
"""

from .base import NetworkEstimator
from .metrics import compute_metrics
from .utilization import compute_utilization

__all__ = [
    "NetworkEstimator",
    "compute_metrics",
    "compute_utilization",
]
