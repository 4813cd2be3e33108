"""
链路参数测试
"""

import pytest
from pydantic import ValidationError

from net_estimate.models.params import ServiceParams


class TestServiceParams:
    """ServiceParams 测试"""

    def test_create_derives_service_rate(self):
        params = ServiceParams.create(1.5e6, 2e8, 4e6, 5, "link")

        assert params.iface == "link"
        assert params.service_rate_pps == pytest.approx(50.0)
        assert params.arrival_rate_pps == 40.0
        assert params.traffic_intensity == pytest.approx(0.8)

    def test_immutable(self, default_params):
        with pytest.raises(ValidationError):
            default_params.packet_load = 10

    def test_json_aliases(self):
        params = ServiceParams.model_validate({
            "interface": "eth0",
            "distance_m": 1000.0,
            "data_rate_bps": 1e6,
            "packet_size_b": 8000.0,
            "packets": 3,
            "lambda": 10.0,
            "mu": 125.0,
        })

        assert params.iface == "eth0"
        assert params.packet_load == 3
        dumped = params.model_dump(by_alias=True)
        assert dumped["lambda"] == 10.0
        assert dumped["mu"] == 125.0

    @pytest.mark.parametrize("field,value", [
        ("data_rate_bps", 0.0),
        ("packet_size_b", -1.0),
        ("distance_m", -5.0),
        ("arrival_rate_pps", -1.0),
    ])
    def test_validation(self, field, value):
        kwargs = dict(iface="x", distance_m=1.0, data_rate_bps=1.0, packet_size_b=1.0, packet_load=1)
        kwargs[field] = value
        with pytest.raises(ValidationError):
            ServiceParams(**kwargs)

    def test_create_rejects_zero_packet_size(self):
        with pytest.raises(ValidationError):
            ServiceParams.create(1.0, 1e6, 0.0, 1, "x")

    def test_zero_service_rate_intensity(self):
        params = ServiceParams(iface="x", distance_m=1.0, data_rate_bps=1.0, packet_size_b=1.0,
                               packet_load=1, arrival_rate_pps=1.0, service_rate_pps=0.0)
        assert params.traffic_intensity == float("inf")

    def test_describe(self, default_params):
        text = default_params.describe()
        assert "Label: test.link" in text
        assert "(N) Packet Load: 5" in text

    @pytest.mark.parametrize("field", ["distance_m", "data_rate_bps", "packet_size_b",
                                       "arrival_rate_pps", "service_rate_pps"])
    @pytest.mark.parametrize("value", [float("inf"), float("nan")])
    def test_rejects_non_finite(self, field, value):
        kwargs = dict(iface="x", distance_m=1.0, data_rate_bps=1.0, packet_size_b=1.0, packet_load=1)
        kwargs[field] = value
        with pytest.raises(ValidationError):
            ServiceParams(**kwargs)
