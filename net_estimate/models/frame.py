"""
传输帧

一次测量区间的计数差值及派生速率。
派生字段在 compute_deltas -> compute_rates -> compute_avg_pkt_size 依次执行前为 None。
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional

from loguru import logger

from ..errors import NoTrafficError
from ..utils.formatters import format_b, format_bibi
from ..utils.units import Byte
from .counters import CounterSnapshot


@dataclass
class Frame:
    """单个测量样本"""
    source: str
    samples: float = 0.0             # 名义采样量(bit)
    payload: bytes = b""             # 原始负载，未使用
    duration_s: float = 0.0          # 采样时长(秒)
    timestamp: datetime = field(default_factory=datetime.now)

    # 计数差值
    sent_b: float = 0.0              # 发送比特数
    recv_b: float = 0.0              # 接收比特数
    sent_pkt: int = 0                # 发送包数
    recv_pkt: int = 0                # 接收包数

    # 派生速率
    upload_bps: Optional[float] = None      # 上行速率(bit/s)
    download_bps: Optional[float] = None    # 下行速率(bit/s)
    pkts_up_pps: Optional[float] = None     # 上行包速率
    pkts_down_pps: Optional[float] = None   # 下行包速率
    avg_pkt_size: Optional[float] = None    # 平均包大小(bit)

    @property
    def total_bits(self) -> float:
        """收发比特总数"""
        return self.sent_b + self.recv_b

    @property
    def total_packets(self) -> int:
        """收发包总数"""
        return self.sent_pkt + self.recv_pkt

    def compute_deltas(self, start: CounterSnapshot, end: CounterSnapshot) -> None:
        """根据两次计数快照计算差值，字节换算为比特"""
        self.sent_b = (end.bytes_sent - start.bytes_sent) * Byte
        self.recv_b = (end.bytes_recv - start.bytes_recv) * Byte
        self.sent_pkt = end.packets_sent - start.packets_sent
        self.recv_pkt = end.packets_recv - start.packets_recv
        logger.debug(
            f"{self.timestamp:%H:%M:%S}, Sent: {format_b(self.sent_b)}, Received: {format_b(self.recv_b)}, "
            f"Packets Sent: {self.sent_pkt}, Packets Received: {self.recv_pkt}"
        )

    def compute_rates(self) -> None:
        """差值除以采样时长得到速率"""
        if self.duration_s <= 0:
            raise ValueError(f"duration must be positive, got {self.duration_s}")
        self.upload_bps = self.sent_b / self.duration_s
        self.download_bps = self.recv_b / self.duration_s
        self.pkts_up_pps = self.sent_pkt / self.duration_s
        self.pkts_down_pps = self.recv_pkt / self.duration_s
        logger.debug(
            f"Upload: {format_bibi(self.upload_bps)}/s, Download: {format_bibi(self.download_bps)}/s, "
            f"Packets: {self.pkts_up_pps:.2f} p/s up, {self.pkts_down_pps:.2f} p/s down"
        )

    def compute_avg_pkt_size(self) -> float:
        """
        计算平均包大小

        Returns:
            平均包大小(bit)

        Raises:
            RuntimeError: 速率尚未计算
            NoTrafficError: 区间内收发包数均为0
        """
        if self.upload_bps is None:
            raise RuntimeError("compute_rates must run before compute_avg_pkt_size")

        packets = self.total_packets
        if packets == 0:
            self.avg_pkt_size = None
            raise NoTrafficError(f"no traffic observed on {self.source} over {self.duration_s}s")

        self.avg_pkt_size = self.total_bits / packets
        logger.debug(f"Average Packet Size: {format_b(self.avg_pkt_size)}")
        return self.avg_pkt_size

    def to_dict(self) -> Dict[str, Any]:
        """导出为扁平记录"""
        return {
            "source": self.source,
            "sample_size": self.samples,
            "duration": self.duration_s,
            "timestamp": self.timestamp.isoformat(),
            "bits_sent": self.sent_b,
            "bits_recv": self.recv_b,
            "pkts_sent": self.sent_pkt,
            "pkts_recv": self.recv_pkt,
            "upload_bps": self.upload_bps,
            "download_bps": self.download_bps,
            "pkts_up": self.pkts_up_pps,
            "pkts_down": self.pkts_down_pps,
            "avg_pkt_size": self.avg_pkt_size,
        }

    def describe(self) -> str:
        """可读的帧描述"""
        return (
            "Frame {\n"
            f"    Source: {self.source},\n"
            f"    Samples: {self.samples},\n"
            f"    Timestamp: {self.timestamp.isoformat()},\n"
            f"    Duration_s: {self.duration_s},\n"
            f"    Sent_b: {self.sent_b}, Recv_b: {self.recv_b},\n"
            f"    Sent_pkt: {self.sent_pkt}, Recv_pkt: {self.recv_pkt},\n"
            f"    Upload_bps: {self.upload_bps}, Download_bps: {self.download_bps},\n"
            f"    PktsUp_pps: {self.pkts_up_pps}, PktsDown_pps: {self.pkts_down_pps},\n"
            f"    AvgPktSize: {self.avg_pkt_size}\n"
            "}"
        )
