"""
数据格式化工具

提供比特量的人类可读格式化，以及估算结果的表格/JSON/CSV输出。
"""

import json
import math
from typing import Dict, Any, List, Optional
from tabulate import tabulate

from ..config.settings import get_settings
from .units import Bit, Byte, Kb, Mb, Gb, Tb, Pb, KiB, MiB, GiB, TiB, PiB


# 十进制比特单位，从大到小
SI_BIT_UNITS = [
    ("Pb", Pb), ("Tb", Tb), ("Gb", Gb), ("Mb", Mb), ("Kb", Kb), ("b", Bit),
]

# 二进制字节单位，从大到小
IBI_UNITS = [
    ("PiB", PiB), ("TiB", TiB), ("GiB", GiB), ("MiB", MiB),
    ("KiB", KiB), ("B", Byte), ("b", Bit),
]

# 窗口记录字段及其显示名称（按输出顺序）
WINDOW_FIELDS = [
    ("interface", "接口"),
    ("frames_serviced", "已服务帧数"),
    ("bits_processed", "处理比特数"),
    ("avg_packet_size_b", "平均包大小"),
    ("avg_packet_transmission_time_s", "单包传输时间(s)"),
    ("total_transmission_time_s", "总传输时间(s)"),
    ("queueing_delay_s", "排队时延 Wq(s)"),
    ("processing_delay_s", "处理时延 1/μ(s)"),
    ("link_prop_delay_s", "链路传播时延(s)"),
    ("rtt_s", "往返时间 RTT(s)"),
    ("average_system_time_mm1_s", "M/M/1系统时间 W(s)"),
    ("persistent_service_time_s", "持久连接服务时间(s)"),
    ("non_persistent_service_time_s", "非持久连接服务时间(s)"),
]


def integer_digits(value: float) -> int:
    """
    计算|value|整数部分的位数

    小于1的值按1位计算（例如 0.5 -> 1, 12.3 -> 2, 1234 -> 4）。
    """
    value = abs(value)
    if value < 1:
        return 1
    return int(math.floor(math.log10(value))) + 1


def format_float(value: float, dec_digits: int) -> str:
    """保留dec_digits位小数，再去掉末尾的0和小数点"""
    text = f"{value:.{dec_digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _format_with_units(value: float, units, max_int_digits: int, dec_digits: int) -> str:
    if math.isnan(value):
        return "未定义"
    if math.isinf(value):
        return f"{'-' if value < 0 else ''}∞ b"

    # 选取第一个满足 value >= size 且整数位数不超过 max_int_digits 的单位
    for name, size in units:
        if value >= size:
            scaled = value / size
            if integer_digits(scaled) <= max_int_digits:
                return f"{format_float(scaled, dec_digits)} {name}"

    # 回退到比特
    return f"{format_float(value / Bit, dec_digits)} b"


def format_bits(value: float, max_int_digits: int = 3, dec_digits: int = 2) -> str:
    """
    将比特数格式化为最大的十进制单位（Pb ... b）

    Args:
        value: 比特数
        max_int_digits: 整数部分允许的最大位数
        dec_digits: 小数位数（末尾的0会被去掉）

    Returns:
        形如 "1.5 Mb" 的字符串
    """
    return _format_with_units(value, SI_BIT_UNITS, max_int_digits, dec_digits)


def format_bits_ibi(value: float, max_int_digits: int = 2, dec_digits: int = 2) -> str:
    """
    将比特数格式化为最大的二进制单位（PiB ... B, b）

    Args:
        value: 比特数
        max_int_digits: 整数部分允许的最大位数
        dec_digits: 小数位数（末尾的0会被去掉）

    Returns:
        形如 "1.5 MiB" 的字符串
    """
    return _format_with_units(value, IBI_UNITS, max_int_digits, dec_digits)


def format_b(value: float) -> str:
    """按全局设置的位数预算做十进制格式化（默认 3, 2）"""
    settings = get_settings()
    return format_bits(value, settings.format_max_int_digits, settings.format_dec_digits)


def format_bibi(value: float) -> str:
    """按全局设置的位数预算做二进制格式化（默认 2, 2）"""
    settings = get_settings()
    return format_bits_ibi(value, settings.ibi_max_int_digits, settings.format_dec_digits)


def _json_safe(value: Any) -> Any:
    # 非有限浮点数不是合法JSON，统一输出为null
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    return value


def to_json(data: Any) -> str:
    """序列化为JSON，无穷大与NaN写为null"""
    return json.dumps(_json_safe(data), indent=2, ensure_ascii=False, allow_nan=False)


def format_seconds(value: Optional[float], precision: int = 5) -> str:
    """格式化秒数，None表示未定义"""
    if value is None:
        return "N/A"
    if math.isinf(value):
        return "∞"
    if math.isnan(value):
        return "未定义"
    return f"{value:.{precision}f}"


def format_percent(value: float) -> str:
    """格式化比例为百分比"""
    if math.isnan(value):
        return "未定义"
    return f"{value * 100:.2f}%"


def _window_value(key: str, record: Dict[str, Any]) -> str:
    value = record.get(key)
    if key == "interface":
        return str(value)
    if key == "frames_serviced":
        return str(value)
    if key in ("bits_processed", "avg_packet_size_b"):
        return "N/A" if value is None else format_b(value)
    return format_seconds(value)


def format_results(result: Dict[str, Any], format_type: str = "table",
                   verbose: bool = False) -> str:
    """
    格式化估算结果

    Args:
        result: 估算结果字典（包含 params 与 window）
        format_type: 输出格式 ("table", "json", "csv")
        verbose: 是否显示详细信息

    Returns:
        格式化后的字符串
    """
    if format_type == "json":
        return to_json(result)

    elif format_type == "csv":
        return format_records_csv([result["window"]])

    else:  # table format
        return format_results_table(result, verbose)


def format_results_table(result: Dict[str, Any], verbose: bool = False) -> str:
    """格式化为表格形式"""
    lines = []
    params = result["params"]
    record = result["window"]

    lines.append("=" * 60)
    lines.append("链路性能估算结果")
    lines.append("=" * 60)

    # 链路参数
    lines.append(f"\n接口: {params['interface']}")
    lines.append(f"  (D) 距离: {params['distance_m']:.2f} m")
    lines.append(f"  (R) 数据速率: {format_b(params['data_rate_bps'])}/s")
    lines.append(f"  (L) 包大小: {format_b(params['packet_size_b'])}")
    lines.append(f"  (N) 包数量: {params['packets']}")
    lines.append(f"  (λ) 到达率: {params['lambda']:.2f} pkt/s")
    lines.append(f"  (μ) 服务率: {params['mu']:.2f} pkt/s")

    rho = result.get("traffic_intensity")
    if rho is not None:
        lines.append(f"  (ρ) 流量强度: {rho:.2f}")
    if result.get("overloaded"):
        lines.append("  警告: λ ≥ μ，队列过载，排队时延为无穷大")

    metrics_data = [[label, _window_value(key, record)]
                    for key, label in WINDOW_FIELDS if key != "interface"]
    lines.append("\n时延指标:")
    lines.append(tabulate(metrics_data, headers=["指标", "值"], tablefmt="grid"))

    if verbose and "delay_breakdown" in result:
        lines.append("\n时延分量:")
        breakdown = [[name, format_seconds(value)]
                     for name, value in result["delay_breakdown"].items()]
        lines.append(tabulate(breakdown, headers=["分量", "时间(s)"], tablefmt="grid"))

    return "\n".join(lines)


def format_records_csv(records: List[Dict[str, Any]]) -> str:
    """将窗口记录列表格式化为CSV"""
    headers = [key for key, _ in WINDOW_FIELDS]
    csv_lines = [",".join(headers)]
    for record in records:
        values = ["" if record.get(key) is None else str(record.get(key)) for key in headers]
        csv_lines.append(",".join(values))
    return "\n".join(csv_lines)


def format_windows_summary(records: List[Dict[str, Any]]) -> str:
    """
    格式化多个传输窗口的对比摘要

    Args:
        records: 窗口记录列表

    Returns:
        格式化的摘要表格
    """
    if not records:
        return "无数据"

    table_data = []
    for record in records:
        table_data.append([
            record.get("interface", "N/A"),
            record.get("frames_serviced", 0),
            format_b(record.get("bits_processed", 0)),
            format_seconds(record.get("total_transmission_time_s")),
            format_seconds(record.get("rtt_s")),
            format_seconds(record.get("average_system_time_mm1_s")),
            format_seconds(record.get("persistent_service_time_s")),
            format_seconds(record.get("non_persistent_service_time_s")),
        ])

    headers = ["接口", "帧数", "比特数", "总传输时间(s)", "RTT(s)", "W(s)", "持久(s)", "非持久(s)"]
    return tabulate(table_data, headers=headers, tablefmt="grid")


def format_sweep_table(rows: List[Dict[str, float]]) -> str:
    """格式化到达率/服务率扫描结果"""
    if not rows:
        return "无数据"

    table_data = []
    for row in rows:
        table_data.append([
            f"{row['lambda']:.1f}",
            f"{row['mu']:.2f}",
            format_seconds(row["rho"], 2),
            format_seconds(row["queueing_delay_s"], 3),
            format_seconds(row["system_time_s"], 3),
        ])

    headers = ["λ (pkt/s)", "μ (pkt/s)", "ρ", "Wq (s)", "W (s)"]
    return tabulate(table_data, headers=headers, tablefmt="grid")


def format_frame(record: Dict[str, Any]) -> str:
    """格式化单个采样帧"""
    avg = record.get("avg_pkt_size")
    metrics_data = [
        ["来源", record["source"]],
        ["时间戳", record["timestamp"]],
        ["采样时长", f"{record['duration']:.2f} s"],
        ["发送", format_b(record["bits_sent"])],
        ["接收", format_b(record["bits_recv"])],
        ["发送包数", record["pkts_sent"]],
        ["接收包数", record["pkts_recv"]],
        ["上行速率", f"{format_bibi(record['upload_bps'])}/s"],
        ["下行速率", f"{format_bibi(record['download_bps'])}/s"],
        ["上行包速率", f"{record['pkts_up']:.2f} pkt/s"],
        ["下行包速率", f"{record['pkts_down']:.2f} pkt/s"],
        ["平均包大小", "无流量" if avg is None else format_b(avg)],
    ]
    return tabulate(metrics_data, headers=["指标", "值"], tablefmt="grid")
