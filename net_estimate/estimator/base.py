"""
基础估算器类

提供链路性能估算的核心接口：单链路窗口估算、多链路利用率汇总、
到达率/服务率扫描以及实时流量采样。
"""

import math
import statistics
from typing import Callable, Dict, Any, Optional, List, Sequence

from ..config.settings import Settings, get_settings
from ..models.frame import Frame
from ..models.params import ServiceParams
from ..models.window import TransmissionWindow, NetworkMetrics
from ..sampling.counters import CounterSource
from ..sampling.sampler import new_frame
from ..utils.units import Mb
from .delay_model import queueing_delay_mm1, system_time_mm1
from .metrics import compute_metrics
from .utilization import compute_utilization


class NetworkEstimator:
    """链路性能估算器主类"""

    def __init__(self, settings: Optional[Settings] = None,
                 counter_source: Optional[CounterSource] = None,
                 sleep: Optional[Callable[[float], None]] = None):
        self.settings = settings or get_settings()
        self.counter_source = counter_source
        self.sleep = sleep

    def build_params(self, distance_m: float, data_rate_bps: float, packet_size_b: float,
                     packets: int, label: str,
                     arrival_rate_pps: Optional[float] = None,
                     service_rate_pps: Optional[float] = None) -> ServiceParams:
        """
        创建链路参数

        未指定λ时使用配置中的默认到达率；未指定μ时按 R/L 推导。
        """
        if arrival_rate_pps is None:
            arrival_rate_pps = self.settings.default_arrival_rate_pps
        params = ServiceParams.create(distance_m, data_rate_bps, packet_size_b,
                                      packets, label, arrival_rate_pps)
        if service_rate_pps is not None:
            # 重新走字段校验
            params = ServiceParams.model_validate(
                {**params.model_dump(), "service_rate_pps": service_rate_pps}
            )
        return params

    def estimate_window(self, params: ServiceParams) -> TransmissionWindow:
        """计算单条链路的传输窗口"""
        return compute_metrics(params, self.settings.propagation_speed_mps)

    def estimate(self, params: ServiceParams) -> Dict[str, Any]:
        """
        执行单链路估算

        Args:
            params: 链路服务参数

        Returns:
            包含参数、窗口记录与时延分量的结果字典
        """
        window = self.estimate_window(params)
        return {
            "estimation_type": "delay_model",
            "params": params.model_dump(by_alias=True),
            "window": window.to_record(),
            "traffic_intensity": params.traffic_intensity,
            "overloaded": math.isinf(window.queueing_delay),
            "delay_breakdown": {
                delay_type.value: value
                for delay_type, value in window.delay_breakdown().items()
            },
        }

    def estimate_utilization(self, params_list: Sequence[ServiceParams]) -> Dict[str, Any]:
        """
        估算多条链路的整体利用率

        Args:
            params_list: 链路参数列表

        Returns:
            包含利用率与窗口日志的结果字典
        """
        windows = [self.estimate_window(params) for params in params_list]
        utilization, n_utilization = compute_utilization(*windows)
        metrics = self.summarize(windows)
        return {
            "estimation_type": "utilization",
            "persistent_utilization": utilization,
            "non_persistent_utilization": n_utilization,
            "network_metrics": metrics.to_dict(),
        }

    def summarize(self, windows: List[TransmissionWindow]) -> NetworkMetrics:
        """
        汇总窗口日志

        NetworkMetrics 本身只是报告载体，以下汇总口径为本项目自行约定：
        延迟与抖动取各窗口RTT的均值与总体标准差(ms)，
        带宽为总比特数/总传输时间，速率为总比特数/持久连接总服务时间(Mbps)。
        无帧的窗口不参与汇总。
        """
        metrics = NetworkMetrics()
        for window in windows:
            metrics.add_window(window)

        active = [window for window in windows if window.frames_serviced > 0]
        if not active:
            return metrics

        rtts_ms = [window.rtt * 1000 for window in active]
        total_bits = sum(window.bits_processed for window in active)
        total_transmission = sum(window.total_transmission_time for window in active)
        total_service = sum(window.persistent_service_time for window in active)

        metrics.network_latency = statistics.fmean(rtts_ms)
        metrics.network_jitter = statistics.pstdev(rtts_ms)
        if total_transmission > 0:
            metrics.network_bandwidth = total_bits / total_transmission / Mb
        if total_service > 0:
            metrics.network_speed = total_bits / total_service / Mb
        return metrics

    def sweep_arrival_rate(self, service_rate_pps: float, steps: int = 20,
                           max_ratio: float = 1.2) -> List[Dict[str, float]]:
        """
        固定μ，λ从0扫描到 max_ratio·μ

        Returns:
            每行包含 lambda, mu, rho, queueing_delay_s, system_time_s
        """
        if steps <= 0:
            raise ValueError(f"steps must be positive, got {steps}")
        step = service_rate_pps / steps
        rows = []
        for i in range(int(round(max_ratio * steps)) + 1):
            rows.append(self._sweep_row(i * step, service_rate_pps))
        return rows

    def sweep_service_rate(self, arrival_rate_pps: float, max_service_rate_pps: float = 100.0,
                           step: float = 10.0) -> List[Dict[str, float]]:
        """
        固定λ，μ从0按step扫描到max_service_rate_pps（不含）

        Returns:
            每行包含 lambda, mu, rho, queueing_delay_s, system_time_s
        """
        if step <= 0:
            raise ValueError(f"step must be positive, got {step}")
        rows = []
        mu = 0.0
        while mu < max_service_rate_pps:
            rows.append(self._sweep_row(arrival_rate_pps, mu))
            mu += step
        return rows

    @staticmethod
    def _sweep_row(lam: float, mu: float) -> Dict[str, float]:
        return {
            "lambda": lam,
            "mu": mu,
            "rho": math.inf if mu == 0 else lam / mu,
            "queueing_delay_s": queueing_delay_mm1(lam, mu),
            "system_time_s": system_time_mm1(lam, mu),
        }

    def sample(self, label: str = "all", duration_s: Optional[float] = None,
               interfaces: Sequence[str] = ()) -> Optional[Frame]:
        """对实时流量采样一次"""
        if duration_s is None:
            duration_s = self.settings.sample_duration_s
        return new_frame(label, 0.0, duration_s, source=self.counter_source,
                         interfaces=interfaces, sleep=self.sleep)
