"""
窗口指标计算

由链路参数合成帧并填充传输窗口的全部派生指标。
"""

import math

from loguru import logger

from ..errors import EmptyWorkloadError
from ..models.frame import Frame
from ..models.params import ServiceParams
from ..models.window import TransmissionWindow
from ..utils.units import PROPAGATION_SPEED_ACTUAL
from .delay_model import (
    transmission_delay,
    propagation_delay,
    round_trip_time,
    queueing_delay_mm1,
    system_time_mm1,
    persistent_service_time,
    non_persistent_service_time,
)


def compute_metrics(params: ServiceParams,
                    speed: float = PROPAGATION_SPEED_ACTUAL) -> TransmissionWindow:
    """
    计算链路的传输窗口

    为每个包合成一个独立的帧（发送一个L比特的包），
    然后按 μ = params.service_rate_pps、λ = params.arrival_rate_pps 填充时延指标。
    平均包大小在全部帧加入之后计算。

    Args:
        params: 链路服务参数
        speed: 信号传播速度(m/s)

    Returns:
        填充完毕的传输窗口

    Raises:
        EmptyWorkloadError: params.packet_load <= 0
    """
    if params.packet_load <= 0:
        raise EmptyWorkloadError(
            f"packet load must be positive for {params.iface!r}, got {params.packet_load}"
        )

    window = TransmissionWindow(interface=params.iface)
    for _ in range(params.packet_load):
        window.add_frame(Frame(
            source=params.iface,
            samples=params.packet_size_b,
            sent_b=params.packet_size_b,
            sent_pkt=1,
        ))

    # 核心时延
    d_trans = transmission_delay(params.packet_size_b, params.data_rate_bps)
    window.avg_packet_transmission_time = d_trans
    window.total_transmission_time = params.packet_load * d_trans
    window.link_prop_delay = propagation_delay(params.distance_m, speed)
    window.rtt = round_trip_time(params.distance_m, speed)

    # M/M/1
    mu = params.service_rate_pps
    lam = params.arrival_rate_pps
    window.processing_delay = math.inf if mu == 0 else 1.0 / mu
    window.queueing_delay = queueing_delay_mm1(lam, mu)
    window.average_system_time_mm1 = system_time_mm1(lam, mu)

    window.persistent_service_time = persistent_service_time(
        params.distance_m, speed, params.packet_size_b, params.data_rate_bps, params.packet_load)
    window.non_persistent_service_time = non_persistent_service_time(
        params.distance_m, speed, params.packet_size_b, params.data_rate_bps, params.packet_load)

    window.update_avg_packet_size()

    if math.isinf(window.queueing_delay):
        logger.warning(f"{params.iface}: λ={lam:.2f} ≥ μ={mu:.2f}, queue is overloaded")
    logger.debug(f"computed window for {params.iface}: {window.describe()}")
    return window
