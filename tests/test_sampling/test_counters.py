"""
网络计数器读取测试
"""

from types import SimpleNamespace

import pytest

from net_estimate.errors import CounterReadError
from net_estimate.sampling.counters import AGGREGATE_NAME, PsutilCounterSource, filter_io_counters


def _stat(sent, recv, psent, precv):
    return SimpleNamespace(bytes_sent=sent, bytes_recv=recv, packets_sent=psent, packets_recv=precv)


class TestFilterIOCounters:
    """filter_io_counters 测试"""

    def test_aggregate(self, fake_source):
        stats = filter_io_counters(False, source=fake_source)

        assert len(stats) == 1
        assert stats[0].name == AGGREGATE_NAME
        assert stats[0].bytes_sent == 1500
        assert stats[0].packets_recv == 25

    def test_aggregate_ignores_filters(self, fake_source):
        stats = filter_io_counters(False, "eth", source=fake_source)
        assert [stat.name for stat in stats] == [AGGREGATE_NAME]

    def test_pernic_without_filters_returns_all(self, fake_source, log_records):
        stats = filter_io_counters(True, source=fake_source)

        assert sorted(stat.name for stat in stats) == ["eth0", "lo", "wlan0"]
        assert any("no interfaces specified" in r["message"] for r in log_records)

    def test_pernic_substring_filter(self, fake_source):
        stats = filter_io_counters(True, "eth", "wlan", source=fake_source)
        assert sorted(stat.name for stat in stats) == ["eth0", "wlan0"]

    def test_each_interface_once(self, fake_source):
        """多个子串匹配同一接口时只返回一次"""
        stats = filter_io_counters(True, "eth", "eth0", "th", source=fake_source)
        assert [stat.name for stat in stats] == ["eth0"]

    def test_no_match(self, fake_source):
        assert filter_io_counters(True, "docker", source=fake_source) == []

    def test_read_failure_returns_none(self, failing_source, log_records):
        assert filter_io_counters(False, source=failing_source) is None
        assert filter_io_counters(True, "eth", source=failing_source) is None
        assert any(r["level"].name == "ERROR" for r in log_records)


class TestPsutilCounterSource:
    """基于psutil的计数器来源"""

    def test_aggregate(self, monkeypatch):
        monkeypatch.setattr(
            "net_estimate.sampling.counters.psutil.net_io_counters",
            lambda pernic=False: _stat(10, 20, 1, 2),
        )
        stats = PsutilCounterSource().io_counters(pernic=False)

        assert len(stats) == 1
        assert stats[0].name == AGGREGATE_NAME
        assert stats[0].bytes_recv == 20

    def test_pernic(self, monkeypatch):
        monkeypatch.setattr(
            "net_estimate.sampling.counters.psutil.net_io_counters",
            lambda pernic=False: {"eth0": _stat(1, 2, 3, 4), "lo": _stat(5, 6, 7, 8)},
        )
        stats = PsutilCounterSource().io_counters(pernic=True)

        assert {stat.name: stat.packets_recv for stat in stats} == {"eth0": 4, "lo": 8}

    def test_os_error_wrapped(self, monkeypatch):
        def fail(pernic=False):
            raise PermissionError("denied")

        monkeypatch.setattr("net_estimate.sampling.counters.psutil.net_io_counters", fail)
        with pytest.raises(CounterReadError):
            PsutilCounterSource().io_counters()

    def test_no_interfaces(self, monkeypatch):
        monkeypatch.setattr(
            "net_estimate.sampling.counters.psutil.net_io_counters",
            lambda pernic=False: None,
        )
        with pytest.raises(CounterReadError):
            PsutilCounterSource().io_counters()

    def test_default_source_used(self, monkeypatch):
        monkeypatch.setattr(
            "net_estimate.sampling.counters.psutil.net_io_counters",
            lambda pernic=False: _stat(10, 20, 1, 2),
        )
        stats = filter_io_counters(False)
        assert stats[0].bytes_sent == 10
