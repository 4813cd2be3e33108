"""
时延模型

无状态的闭式公式：传输时延、传播时延、RTT、服务率、M/M/1排队时延与系统时间，
以及持久/非持久连接的服务时间。

符号:
    L  包大小(bit)          R  数据速率(bit/s)
    D  距离(m)              S  传播速度(m/s)
    N  包数量               λ  到达率(pkt/s)
    μ  服务率(pkt/s)        ρ  λ/μ
"""

import math


def transmission_delay(bits: float, rate: float) -> float:
    """传输时延 L / R"""
    return bits / rate


def propagation_delay(distance: float, speed: float) -> float:
    """传播时延 D / S"""
    return distance / speed


def round_trip_time(distance: float, speed: float) -> float:
    """RTT = 2·D/S"""
    return 2 * propagation_delay(distance, speed)


def service_rate(rate: float, bits: float) -> float:
    """服务率 μ = R / L (pkt/s)"""
    return rate / bits


def queueing_delay_mm1(arrival_rate: float, service_rate_pps: float) -> float:
    """
    M/M/1平均排队时延 Wq = ρ / (μ - λ)

    λ ≥ μ 时系统过载，返回正无穷。
    """
    den = service_rate_pps - arrival_rate
    if den <= 0:
        return math.inf
    rho = arrival_rate / service_rate_pps
    return rho / den


def system_time_mm1(arrival_rate: float, service_rate_pps: float) -> float:
    """M/M/1平均系统时间 W = Wq + 1/μ，过载时为正无穷"""
    wq = queueing_delay_mm1(arrival_rate, service_rate_pps)
    if math.isinf(wq):
        return math.inf
    return wq + 1.0 / service_rate_pps


def persistent_service_time(distance: float, speed: float, bits: float,
                            rate: float, packets: int) -> float:
    """持久连接服务时间 2·RTT + N·d_trans"""
    rtt = round_trip_time(distance, speed)
    d_trans = transmission_delay(bits, rate)
    return 2 * rtt + packets * d_trans


def non_persistent_service_time(distance: float, speed: float, bits: float,
                                rate: float, packets: int) -> float:
    """非持久连接服务时间 (2·RTT + d_trans)·N"""
    rtt = round_trip_time(distance, speed)
    d_trans = transmission_delay(bits, rate)
    return (2 * rtt + d_trans) * packets
