"""
pytest配置文件

定义测试的全局配置和fixture。
"""

import pytest
import sys
from pathlib import Path
from typing import Dict, List, Tuple, Union

from loguru import logger

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from net_estimate.errors import CounterReadError
from net_estimate.models.counters import CounterSnapshot
from net_estimate.models.params import ServiceParams
from net_estimate.sampling.counters import AGGREGATE_NAME, CounterSource

# (bytes_sent, bytes_recv, packets_sent, packets_recv)
Reading = Dict[str, Tuple[int, int, int, int]]


class FakeCounterSource(CounterSource):
    """按顺序返回预设读数的计数器来源"""

    def __init__(self, readings: List[Union[Reading, Exception]]):
        self.readings = list(readings)
        self.calls = 0

    def io_counters(self, pernic: bool = False) -> List[CounterSnapshot]:
        reading = self.readings[min(self.calls, len(self.readings) - 1)]
        self.calls += 1
        if isinstance(reading, Exception):
            raise reading

        snapshots = [CounterSnapshot(name, *values) for name, values in reading.items()]
        if pernic:
            return snapshots
        return [CounterSnapshot(
            AGGREGATE_NAME,
            sum(s.bytes_sent for s in snapshots),
            sum(s.bytes_recv for s in snapshots),
            sum(s.packets_sent for s in snapshots),
            sum(s.packets_recv for s in snapshots),
        )]


@pytest.fixture
def default_params():
    """示例链路参数（μ=50, λ=40）"""
    return ServiceParams(
        iface="test.link",
        distance_m=1.5e6,
        data_rate_bps=2e8,
        packet_size_b=3.2e7,
        packet_load=5,
        arrival_rate_pps=40.0,
        service_rate_pps=50.0,
    )


@pytest.fixture
def interface_readings():
    """两次读数：eth0有流量，lo无流量"""
    return [
        {"eth0": (1000, 2000, 10, 20), "lo": (500, 500, 5, 5), "wlan0": (0, 0, 0, 0)},
        {"eth0": (2000, 4000, 15, 30), "lo": (500, 500, 5, 5), "wlan0": (100, 0, 1, 0)},
    ]


@pytest.fixture
def fake_source(interface_readings):
    """带流量的计数器来源"""
    return FakeCounterSource(interface_readings)


@pytest.fixture
def failing_source():
    """总是读取失败的计数器来源"""
    return FakeCounterSource([CounterReadError("permission denied")])


@pytest.fixture
def log_records():
    """捕获net_estimate的日志记录"""
    records = []
    logger.enable("net_estimate")
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
    logger.disable("net_estimate")


@pytest.fixture
def make_source():
    """构造自定义读数的计数器来源"""
    return FakeCounterSource


@pytest.fixture
def global_settings():
    """修改全局设置，测试结束后恢复"""
    from net_estimate.config.settings import config_manager

    yield config_manager
    config_manager.reset()
