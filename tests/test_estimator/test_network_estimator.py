"""
估算器主类测试
"""

import json
import math

import pytest
from pydantic import ValidationError

from net_estimate.config.settings import Settings
from net_estimate.estimator.base import NetworkEstimator
from net_estimate.utils.units import PROPAGATION_SPEED_APPROX


@pytest.fixture
def estimator():
    return NetworkEstimator(Settings())


class TestBuildParams:
    """参数构建"""

    def test_defaults_from_settings(self):
        estimator = NetworkEstimator(Settings(default_arrival_rate_pps=12.5))
        params = estimator.build_params(1e3, 2e8, 4e6, 5, "link")

        assert params.arrival_rate_pps == 12.5
        assert params.service_rate_pps == pytest.approx(50.0)

    def test_explicit_rates(self, estimator):
        params = estimator.build_params(1e3, 2e8, 4e6, 5, "link",
                                        arrival_rate_pps=10.0, service_rate_pps=20.0)
        assert params.arrival_rate_pps == 10.0
        assert params.service_rate_pps == 20.0
        assert params.iface == "link"
        assert params.packet_load == 5

    @pytest.mark.parametrize("service_rate", [-5.0, math.inf, math.nan])
    def test_invalid_service_rate_override(self, estimator, service_rate):
        with pytest.raises(ValidationError):
            estimator.build_params(1e3, 2e8, 4e6, 5, "x", service_rate_pps=service_rate)

    def test_non_finite_data_rate(self, estimator):
        with pytest.raises(ValidationError):
            estimator.build_params(1e3, math.inf, 4e6, 5, "x")


class TestEstimate:
    """单链路估算"""

    def test_result_structure(self, estimator, default_params):
        result = estimator.estimate(default_params)

        assert result["estimation_type"] == "delay_model"
        assert result["params"]["interface"] == "test.link"
        assert result["params"]["lambda"] == 40.0
        assert result["params"]["mu"] == 50.0
        assert result["traffic_intensity"] == pytest.approx(0.8)
        assert result["overloaded"] is False
        assert result["window"]["queueing_delay_s"] == pytest.approx(0.08)
        assert result["delay_breakdown"]["queueing"] == pytest.approx(0.08)

    def test_result_is_json_serializable(self, estimator, default_params):
        text = json.dumps(estimator.estimate(default_params))
        assert "test.link" in text

    def test_overloaded_flag(self, estimator, default_params):
        params = default_params.model_copy(update={"arrival_rate_pps": 50.0})
        result = estimator.estimate(params)

        assert result["overloaded"] is True
        assert result["window"]["average_system_time_mm1_s"] == math.inf

    def test_propagation_speed_from_settings(self, default_params):
        estimator = NetworkEstimator(Settings(propagation_speed_mps=PROPAGATION_SPEED_APPROX))
        window = estimator.estimate_window(default_params)
        assert window.link_prop_delay == pytest.approx(0.005)


class TestEstimateUtilization:
    """多链路利用率"""

    def test_utilization_and_metrics(self, estimator, default_params):
        second = default_params.model_copy(update={"iface": "second", "distance_m": 3e6})
        result = estimator.estimate_utilization([default_params, second])

        assert 0 < result["non_persistent_utilization"] <= result["persistent_utilization"] < 1
        metrics = result["network_metrics"]
        assert len(metrics["transmission_log"]) == 2
        assert metrics["network_latency"] > 0
        assert metrics["network_jitter"] > 0
        # 总比特数 / 总传输时间 = 数据速率
        assert metrics["network_bandwidth"] == pytest.approx(200.0)
        assert metrics["network_speed"] < metrics["network_bandwidth"]

    def test_summarize_empty(self, estimator):
        metrics = estimator.summarize([])
        assert metrics.transmission_log == []
        assert metrics.network_latency == 0.0


class TestSweeps:
    """λ/μ扫描"""

    def test_arrival_rate_sweep(self, estimator):
        rows = estimator.sweep_arrival_rate(50.0, steps=10, max_ratio=1.2)

        assert len(rows) == 13
        assert rows[0]["lambda"] == 0.0
        assert rows[0]["queueing_delay_s"] == 0.0
        assert rows[8]["queueing_delay_s"] == pytest.approx(0.08)
        assert rows[10]["queueing_delay_s"] == math.inf
        assert rows[-1]["system_time_s"] == math.inf
        delays = [row["queueing_delay_s"] for row in rows[:10]]
        assert delays == sorted(delays)

    def test_service_rate_sweep(self, estimator):
        rows = estimator.sweep_service_rate(40.0, max_service_rate_pps=100.0, step=10.0)

        assert [row["mu"] for row in rows] == [0.0, 10.0, 20.0, 30.0, 40.0, 50.0, 60.0, 70.0, 80.0, 90.0]
        assert rows[0]["rho"] == math.inf
        assert all(row["queueing_delay_s"] == math.inf for row in rows[:5])
        assert rows[5]["queueing_delay_s"] == pytest.approx(0.08)

    @pytest.mark.parametrize("kwargs", [{"steps": 0}, {"steps": -5}])
    def test_invalid_steps(self, estimator, kwargs):
        with pytest.raises(ValueError):
            estimator.sweep_arrival_rate(50.0, **kwargs)

    def test_invalid_mu_step(self, estimator):
        with pytest.raises(ValueError):
            estimator.sweep_service_rate(40.0, step=0)


class TestSample:
    """实时采样"""

    def test_sample_with_injected_source(self, fake_source):
        slept = []
        estimator = NetworkEstimator(Settings(sample_duration_s=2.0), counter_source=fake_source,
                                     sleep=slept.append)
        frame = estimator.sample("all")

        assert frame is not None
        assert frame.duration_s == 2.0
        assert frame.sent_b == (1000 + 100) * 8
        assert frame.upload_bps == pytest.approx((1000 + 100) * 8 / 2.0)
        assert slept == [2.0]

    def test_sample_failure(self, failing_source):
        estimator = NetworkEstimator(Settings(), counter_source=failing_source, sleep=lambda s: None)
        assert estimator.sample("all", 1.0) is None
