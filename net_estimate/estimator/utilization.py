"""
利用率汇总

将多个传输窗口合并为持久/非持久连接的链路利用率。
"""

import math
from typing import Tuple

from loguru import logger

from ..models.window import TransmissionWindow


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return math.nan
    return numerator / denominator


def compute_utilization(*windows: TransmissionWindow) -> Tuple[float, float]:
    """
    计算链路忙于传输的时间比例

    utilization = Σ总传输时间 / Σ服务时间，分别对持久与非持久连接计算。
    无帧的窗口只产生警告，仍以0参与求和。分母为0时结果为NaN（未定义）。

    Args:
        *windows: 传输窗口

    Returns:
        (持久连接利用率, 非持久连接利用率)
    """
    persistent_total = 0.0
    non_persistent_total = 0.0
    transmission_total = 0.0

    for window in windows:
        if window.frames_serviced == 0:
            logger.warning(f"window {window.interface!r} has no frames, cannot calculate utilization")
        persistent_total += window.persistent_service_time
        non_persistent_total += window.non_persistent_service_time
        transmission_total += window.total_transmission_time

    utilization = _ratio(transmission_total, persistent_total)
    n_utilization = _ratio(transmission_total, non_persistent_total)

    if math.isnan(utilization) or math.isnan(n_utilization):
        logger.warning("utilization undefined: total service time is zero")

    logger.debug(
        f"Utilization -- total transmission: {transmission_total:.5f}s, "
        f"persistent: {persistent_total:.5f}s, non-persistent: {non_persistent_total:.5f}s, "
        f"utilization (persistent): {utilization * 100:.2f}%, "
        f"utilization (non-persistent): {n_utilization * 100:.2f}%"
    )
    return utilization, n_utilization
