"""
传输窗口

有序的帧集合以及时延模型的派生指标。
bits_processed 与 frames_serviced 由 add_frame/remove_frame 增量维护。
窗口不是线程安全的，并发修改需由调用方串行化。
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Iterable, List, Optional

from loguru import logger

from ..errors import FrameNotFoundError
from ..utils.formatters import format_b
from ..utils.units import DelayType
from .frame import Frame


@dataclass
class TransmissionWindow:
    """传输窗口"""
    interface: str = ""
    frames: List[Frame] = field(default_factory=list)
    bits_processed: float = 0.0                    # 帧比特总数
    frames_serviced: int = 0                       # 帧数量
    avg_packet_size: Optional[float] = None        # 平均包大小(bit)
    avg_packet_transmission_time: float = 0.0      # 单包传输时间(s)
    total_transmission_time: float = 0.0           # 背靠背传输全部包的时间(s)
    link_prop_delay: float = 0.0                   # 单向传播时延 D/S (s)
    processing_delay: float = 0.0                  # 1/μ (s)
    queueing_delay: float = 0.0                    # ρ/(μ-λ) (s)
    rtt: float = 0.0                               # 2·D/S (s)
    persistent_service_time: float = 0.0           # 持久连接服务时间(s)
    non_persistent_service_time: float = 0.0       # 非持久连接服务时间(s)
    average_system_time_mm1: float = 0.0           # Wq + 1/μ (s)

    def __post_init__(self):
        existing, self.frames = self.frames, []
        for frame in existing:
            self.add_frame(frame)

    @classmethod
    def from_frames(cls, frames: Iterable[Frame], interface: str = "") -> "TransmissionWindow":
        """由已有帧构建窗口"""
        return cls(interface=interface, frames=list(frames))

    def add_frame(self, frame: Frame) -> None:
        """追加帧并累加计数"""
        self.frames.append(frame)
        self.bits_processed += frame.total_bits
        self.frames_serviced += 1

    def remove_frame(self, label: str, strict: bool = False) -> Optional[Frame]:
        """
        移除第一个来源标签匹配的帧

        Args:
            label: 帧来源标签
            strict: 为True时找不到则抛出FrameNotFoundError

        Returns:
            被移除的帧；未找到且非strict时返回None
        """
        for i, frame in enumerate(self.frames):
            if frame.source == label:
                self.bits_processed -= frame.total_bits
                self.frames_serviced -= 1
                del self.frames[i]
                logger.debug(
                    f"Removed frame: {label}, total size: {self.bits_processed:.2f} bits, "
                    f"total count: {self.frames_serviced}"
                )
                return frame

        if strict:
            raise FrameNotFoundError(f"frame not found: {label}")
        logger.warning(f"frame not found: {label}")
        return None

    def update_avg_packet_size(self) -> Optional[float]:
        """按当前帧重新计算平均包大小，无帧时为None"""
        if self.frames_serviced == 0:
            self.avg_packet_size = None
        else:
            self.avg_packet_size = self.bits_processed / self.frames_serviced
        return self.avg_packet_size

    def delay_breakdown(self) -> Dict[DelayType, float]:
        """按时延分量拆分"""
        return {
            DelayType.TRANSMISSION: self.avg_packet_transmission_time,
            DelayType.PROPAGATION: self.link_prop_delay,
            DelayType.PROCESSING: self.processing_delay,
            DelayType.QUEUEING: self.queueing_delay,
            DelayType.DELAY: self.average_system_time_mm1,
        }

    def to_record(self) -> Dict[str, Any]:
        """导出为扁平记录，用于JSON或表格输出"""
        return {
            "interface": self.interface,
            "bits_processed": self.bits_processed,
            "frames_serviced": self.frames_serviced,
            "avg_packet_size_b": self.avg_packet_size,
            "avg_packet_transmission_time_s": self.avg_packet_transmission_time,
            "total_transmission_time_s": self.total_transmission_time,
            "link_prop_delay_s": self.link_prop_delay,
            "processing_delay_s": self.processing_delay,
            "queueing_delay_s": self.queueing_delay,
            "rtt_s": self.rtt,
            "persistent_service_time_s": self.persistent_service_time,
            "non_persistent_service_time_s": self.non_persistent_service_time,
            "average_system_time_mm1_s": self.average_system_time_mm1,
        }

    def describe(self) -> str:
        """可读的窗口描述"""
        avg = "N/A" if self.avg_packet_size is None else format_b(self.avg_packet_size)
        return (
            "TransmissionWindow {\n"
            f"    Frames Serviced: {self.frames_serviced},\n"
            f"    Bits Processed: {format_b(self.bits_processed)},\n"
            f"    Avg Packet Size: {avg},\n"
            f"    Avg Packet Transmission Time: {self.avg_packet_transmission_time:.5f}s,\n"
            f"    Total Transmission Time: {self.total_transmission_time:.5f}s,\n"
            f"    Queueing Delay: {self.queueing_delay:.5f}s,\n"
            f"    Processing Delay: {self.processing_delay:.5f}s,\n"
            f"    Link Prop Delay: {self.link_prop_delay:.5f}s,\n"
            f"    RTT: {self.rtt:.5f}s,\n"
            f"    Average System Time MM1: {self.average_system_time_mm1:.5f}s,\n"
            f"    Persistent Service Time: {self.persistent_service_time:.5f}s,\n"
            f"    Non Persistent Service Time: {self.non_persistent_service_time:.5f}s,\n"
            f"    Frames: {len(self.frames)}\n"
            "}"
        )


@dataclass
class NetworkMetrics:
    """传输窗口日志与汇总指标（仅作为报告载体）"""
    transmission_log: List[TransmissionWindow] = field(default_factory=list)
    network_latency: float = 0.0     # 毫秒
    network_speed: float = 0.0       # Mbps
    network_bandwidth: float = 0.0   # Mbps
    network_jitter: float = 0.0      # 毫秒

    def add_window(self, window: TransmissionWindow) -> None:
        """追加窗口到日志"""
        self.transmission_log.append(window)

    def to_dict(self) -> Dict[str, Any]:
        """导出为字典"""
        return {
            "transmission_log": [window.to_record() for window in self.transmission_log],
            "network_latency": self.network_latency,
            "network_speed": self.network_speed,
            "network_bandwidth": self.network_bandwidth,
            "network_jitter": self.network_jitter,
        }
