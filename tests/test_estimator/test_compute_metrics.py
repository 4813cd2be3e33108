"""
窗口指标计算测试
"""

import math

import pytest

from net_estimate.errors import EmptyWorkloadError
from net_estimate.estimator.metrics import compute_metrics
from net_estimate.models.params import ServiceParams
from net_estimate.utils.units import DelayType, PROPAGATION_SPEED_ACTUAL, PROPAGATION_SPEED_APPROX


class TestComputeMetrics:
    """compute_metrics 测试"""

    def test_reference_scenario(self, default_params):
        """D=1.5e6, R=2e8, L=3.2e7, N=5, λ=40, μ=50"""
        window = compute_metrics(default_params)

        assert window.processing_delay == pytest.approx(0.02)
        assert window.queueing_delay == pytest.approx(0.08)
        assert window.average_system_time_mm1 == pytest.approx(0.10)

        assert window.avg_packet_transmission_time == pytest.approx(0.16)
        assert window.total_transmission_time == pytest.approx(0.8)
        assert window.link_prop_delay == pytest.approx(1.5e6 / PROPAGATION_SPEED_ACTUAL)
        assert window.rtt == pytest.approx(2 * 1.5e6 / PROPAGATION_SPEED_ACTUAL)

        rtt = window.rtt
        assert window.persistent_service_time == pytest.approx(2 * rtt + 5 * 0.16)
        assert window.non_persistent_service_time == pytest.approx((2 * rtt + 0.16) * 5)

    def test_frames_synthesized(self, default_params):
        window = compute_metrics(default_params)

        assert window.frames_serviced == 5
        assert len(window.frames) == 5
        assert window.interface == "test.link"
        assert all(frame.source == "test.link" for frame in window.frames)
        # 每个包对应一个独立的帧
        assert len({id(frame) for frame in window.frames}) == 5

    def test_average_packet_size_after_frames(self, default_params):
        window = compute_metrics(default_params)

        assert window.bits_processed == pytest.approx(5 * 3.2e7)
        assert window.avg_packet_size == pytest.approx(3.2e7)

    @pytest.mark.parametrize("packets", [0, -1])
    def test_empty_workload_fails_fast(self, default_params, packets):
        params = default_params.model_copy(update={"packet_load": packets})
        with pytest.raises(EmptyWorkloadError):
            compute_metrics(params)

    def test_empty_workload_is_value_error(self, default_params):
        params = default_params.model_copy(update={"packet_load": 0})
        with pytest.raises(ValueError):
            compute_metrics(params)

    def test_overload_propagates_infinity(self, default_params, log_records):
        params = default_params.model_copy(update={"arrival_rate_pps": 60.0})
        window = compute_metrics(params)

        assert window.queueing_delay == math.inf
        assert window.average_system_time_mm1 == math.inf
        assert window.processing_delay == pytest.approx(0.02)
        assert any(record["level"].name == "WARNING" for record in log_records)

    def test_zero_service_rate(self, default_params):
        params = default_params.model_copy(update={"service_rate_pps": 0.0})
        window = compute_metrics(params)

        assert window.processing_delay == math.inf
        assert window.queueing_delay == math.inf

    def test_custom_speed(self, default_params):
        window = compute_metrics(default_params, speed=PROPAGATION_SPEED_APPROX)
        assert window.link_prop_delay == pytest.approx(0.005)
        assert window.rtt == pytest.approx(0.01)

    def test_delay_breakdown(self, default_params):
        breakdown = compute_metrics(default_params).delay_breakdown()

        assert set(breakdown) == set(DelayType)
        assert breakdown[DelayType.QUEUEING] == pytest.approx(0.08)
        assert breakdown[DelayType.PROCESSING] == pytest.approx(0.02)
        assert breakdown[DelayType.DELAY] == pytest.approx(0.10)

    def test_derived_service_rate(self):
        """ServiceParams.create 按 R/L 推导μ"""
        params = ServiceParams.create(1.5e6, 2e8, 4e6, 5, "derived")
        window = compute_metrics(params)

        assert params.service_rate_pps == pytest.approx(50.0)
        assert params.arrival_rate_pps == 40.0
        assert window.average_system_time_mm1 == pytest.approx(0.10)
