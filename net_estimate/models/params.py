"""
链路服务参数

描述一条假设链路：距离、数据速率、包大小、包数量以及M/M/1排队参数。
"""

from pydantic import BaseModel, ConfigDict, Field


class ServiceParams(BaseModel):
    """链路服务参数（创建后不可修改）"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, allow_inf_nan=False)

    iface: str = Field(default="", alias="interface", description="接口/查询标签")
    distance_m: float = Field(ge=0, description="(D) 物理距离(米)")
    data_rate_bps: float = Field(gt=0, description="(R) 数据速率(bit/s)")
    packet_size_b: float = Field(gt=0, description="(L) 单个包大小(bit)")
    packet_load: int = Field(alias="packets", description="(N) 包数量")
    arrival_rate_pps: float = Field(default=0.0, ge=0, alias="lambda", description="(λ) 到达率(pkt/s)")
    service_rate_pps: float = Field(default=0.0, ge=0, alias="mu", description="(μ) 服务率(pkt/s)")

    @classmethod
    def create(cls, distance_m: float, data_rate_bps: float, packet_size_b: float,
               packets: int, label: str, arrival_rate_pps: float = 40.0) -> "ServiceParams":
        """
        按链路描述创建参数，服务率由 μ = R / L 推导

        Args:
            distance_m: 链路距离(米)
            data_rate_bps: 数据速率(bit/s)
            packet_size_b: 包大小(bit)
            packets: 包数量
            label: 标签
            arrival_rate_pps: 到达率λ

        Returns:
            ServiceParams实例
        """
        return cls(
            iface=label,
            distance_m=distance_m,
            data_rate_bps=data_rate_bps,
            packet_size_b=packet_size_b,
            packet_load=packets,
            arrival_rate_pps=arrival_rate_pps,
            # 包大小非法时交给字段校验报错
            service_rate_pps=data_rate_bps / packet_size_b if packet_size_b > 0 else 0.0,
        )

    @property
    def traffic_intensity(self) -> float:
        """ρ = λ/μ，μ为0时为无穷大"""
        if self.service_rate_pps == 0:
            return float("inf")
        return self.arrival_rate_pps / self.service_rate_pps

    def describe(self) -> str:
        """可读的参数描述"""
        return (
            "ServiceParams {\n"
            f"    Label: {self.iface},\n"
            f"    (D) Distance (m): {self.distance_m:.2f},\n"
            f"    (R) Data Rate (bps): {self.data_rate_bps:.2f},\n"
            f"    (L) Packet Size (b): {self.packet_size_b:.2f},\n"
            f"    (N) Packet Load: {self.packet_load},\n"
            f"    (λ) Arrival Rate (pps): {self.arrival_rate_pps:.2f},\n"
            f"    (μ) Service Rate (pps): {self.service_rate_pps:.2f}\n"
            "}"
        )
