"""
流量采样

单次采样：读取计数快照，等待指定时长，再次读取，计算差值、速率与平均包大小。
持续采样：按固定间隔循环采样，直到收到停止信号。
"""

import threading
import time
from datetime import datetime
from typing import Callable, Optional, Sequence

from loguru import logger

from ..errors import NoTrafficError
from ..models.counters import CounterSnapshot
from ..models.frame import Frame
from ..utils.formatters import format_b, format_bibi
from .counters import AGGREGATE_NAME, CounterSource, filter_io_counters


def read_snapshot(source: Optional[CounterSource] = None,
                  interfaces: Sequence[str] = ()) -> Optional[CounterSnapshot]:
    """
    读取一次计数快照

    未指定接口时使用全部接口的汇总；指定接口子串时对匹配的接口求和。

    Returns:
        计数快照；读取失败或没有匹配接口时返回None
    """
    if not interfaces:
        stats = filter_io_counters(False, source=source)
        return stats[0] if stats else None

    stats = filter_io_counters(True, *interfaces, source=source)
    if stats is None:
        return None
    if not stats:
        logger.warning(f"no interface matches {list(interfaces)}")
        return None

    return CounterSnapshot(
        name=",".join(stat.name for stat in stats),
        bytes_sent=sum(stat.bytes_sent for stat in stats),
        bytes_recv=sum(stat.bytes_recv for stat in stats),
        packets_sent=sum(stat.packets_sent for stat in stats),
        packets_recv=sum(stat.packets_recv for stat in stats),
    )


def _finish_frame(frame: Frame, start: CounterSnapshot, end: CounterSnapshot) -> None:
    frame.compute_deltas(start, end)
    frame.compute_rates()
    try:
        frame.compute_avg_pkt_size()
    except NoTrafficError as e:
        logger.warning(f"{e}, average packet size undefined")


def populate_frame(frame: Frame, source: Optional[CounterSource] = None,
                   interfaces: Sequence[str] = (),
                   sleep: Optional[Callable[[float], None]] = None) -> bool:
    """
    对已有帧执行一次采样，阻塞 frame.duration_s 秒

    Args:
        frame: 待填充的帧
        source: 计数器来源
        interfaces: 接口名子串过滤
        sleep: 等待函数，默认time.sleep

    Returns:
        是否成功填充；计数读取失败时返回False，派生字段不计算
    """
    if frame.duration_s <= 0:
        raise ValueError(f"duration must be positive, got {frame.duration_s}")

    start = read_snapshot(source, interfaces)
    if start is None:
        return False

    frame.timestamp = datetime.now()
    (sleep or time.sleep)(frame.duration_s)

    end = read_snapshot(source, interfaces)
    if end is None:
        return False

    _finish_frame(frame, start, end)
    return True


def new_frame(label: str, samples: float, duration_s: float,
              source: Optional[CounterSource] = None,
              interfaces: Sequence[str] = (),
              sleep: Optional[Callable[[float], None]] = None) -> Optional[Frame]:
    """
    新建一个帧并采样全部（或过滤后的）接口流量

    Args:
        label: 帧来源标签
        samples: 名义采样量
        duration_s: 采样时长(秒)
        source: 计数器来源
        interfaces: 接口名子串过滤
        sleep: 等待函数

    Returns:
        采样完成的帧；计数读取失败时返回None
    """
    frame = Frame(source=label, samples=samples, duration_s=duration_s)
    if not populate_frame(frame, source, interfaces, sleep):
        return None
    return frame


class ContinuousSampler:
    """按固定间隔持续采样，直到调用stop()"""

    def __init__(self, interval_s: float = 1.0,
                 source: Optional[CounterSource] = None,
                 interfaces: Sequence[str] = (),
                 on_frame: Optional[Callable[[Frame], None]] = None,
                 max_ticks: Optional[int] = None,
                 label: str = AGGREGATE_NAME):
        if interval_s <= 0:
            raise ValueError(f"interval must be positive, got {interval_s}")
        self.interval_s = interval_s
        self.source = source
        self.interfaces = tuple(interfaces)
        self.on_frame = on_frame
        self.max_ticks = max_ticks
        self.label = label
        self.ticks = 0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def stopped(self) -> bool:
        """是否已收到停止信号"""
        return self._stop_event.is_set()

    def stop(self) -> None:
        """发出停止信号，当前等待会立即结束"""
        self._stop_event.set()

    def run(self) -> None:
        """在当前线程中运行采样循环"""
        logger.info(f"Starting counter sampling (interval: {self.interval_s}s)...")
        prev = read_snapshot(self.source, self.interfaces)

        while not self._stop_event.wait(self.interval_s):
            curr = read_snapshot(self.source, self.interfaces)
            if curr is None:
                continue
            if prev is None:
                prev = curr
                continue

            frame = Frame(source=self.label, duration_s=self.interval_s)
            _finish_frame(frame, prev, curr)
            logger.info(
                f"{frame.timestamp:%H:%M:%S} → Upload: {format_bibi(frame.upload_bps)}/s, "
                f"Download: {format_bibi(frame.download_bps)}/s, "
                f"Packets: {frame.pkts_up_pps + frame.pkts_down_pps:.2f} p/s, "
                f"Avg Packet Size: {'N/A' if frame.avg_pkt_size is None else format_b(frame.avg_pkt_size)}"
            )
            if self.on_frame is not None:
                self.on_frame(frame)

            prev = curr
            self.ticks += 1
            if self.max_ticks is not None and self.ticks >= self.max_ticks:
                break

        logger.info(f"Counter sampling stopped after {self.ticks} ticks")

    def start(self) -> threading.Thread:
        """在后台线程中运行采样循环"""
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("sampler already running")
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run, name="counter-sampler", daemon=True)
        self._thread.start()
        return self._thread

    def join(self, timeout: Optional[float] = None) -> None:
        """等待后台线程结束"""
        if self._thread is not None:
            self._thread.join(timeout)

    def __enter__(self) -> "ContinuousSampler":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
        self.join()
