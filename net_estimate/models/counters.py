"""
网络计数器快照

操作系统报告的累计收发字节数与包数（自开机或进程启动以来）。
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CounterSnapshot:
    """单个接口（或全部接口汇总）的累计计数"""
    name: str
    bytes_sent: int
    bytes_recv: int
    packets_sent: int
    packets_recv: int
