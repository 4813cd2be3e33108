"""
网络计数器读取

通过可注入的计数器来源读取操作系统的累计网络I/O计数，
支持全部接口汇总或按接口读取，并按接口名子串过滤。
"""

from abc import ABC, abstractmethod
from typing import List, Optional

import psutil
from loguru import logger

from ..errors import CounterReadError
from ..models.counters import CounterSnapshot

AGGREGATE_NAME = "all"


class CounterSource(ABC):
    """网络计数器来源基础类"""

    @abstractmethod
    def io_counters(self, pernic: bool = False) -> List[CounterSnapshot]:
        """
        读取累计计数

        Args:
            pernic: True按接口返回，False返回单个汇总

        Returns:
            计数快照列表；汇总模式下只有一个元素

        Raises:
            CounterReadError: 读取失败
        """


class PsutilCounterSource(CounterSource):
    """基于psutil的计数器来源"""

    def io_counters(self, pernic: bool = False) -> List[CounterSnapshot]:
        try:
            stats = psutil.net_io_counters(pernic=pernic)
        except (OSError, RuntimeError) as e:
            raise CounterReadError(f"unable to read IO counters: {e}") from e

        if stats is None:
            # 没有可用的网络接口
            raise CounterReadError("no network interfaces reported")

        if not pernic:
            return [_snapshot(AGGREGATE_NAME, stats)]
        return [_snapshot(name, stat) for name, stat in stats.items()]


def _snapshot(name: str, stat) -> CounterSnapshot:
    return CounterSnapshot(
        name=name,
        bytes_sent=stat.bytes_sent,
        bytes_recv=stat.bytes_recv,
        packets_sent=stat.packets_sent,
        packets_recv=stat.packets_recv,
    )


def filter_io_counters(pernic: bool, *ifaces: str,
                       source: Optional[CounterSource] = None) -> Optional[List[CounterSnapshot]]:
    """
    读取并过滤网络计数器

    pernic为True且未指定过滤条件时返回全部接口；
    指定过滤条件时只返回名称包含任一子串的接口（每个接口最多一次）。

    Args:
        pernic: 是否按接口读取
        *ifaces: 接口名子串
        source: 计数器来源，默认使用psutil

    Returns:
        计数快照列表；读取失败时返回None
    """
    source = source or PsutilCounterSource()
    try:
        stats = source.io_counters(pernic)
    except CounterReadError as e:
        logger.error(f"unable to read IO counters: {e}")
        return None

    if not pernic:
        return stats

    if not ifaces:
        logger.info("no interfaces specified, returning all interfaces")
        return stats

    filtered = [stat for stat in stats if any(f in stat.name for f in ifaces)]
    logger.debug(f"filtered {len(filtered)} interfaces")
    return filtered
