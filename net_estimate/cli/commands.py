"""
CLI命令实现

提供命令行界面的具体命令实现：链路估算、排队扫描、利用率汇总与实时流量采样。
"""

import click
from typing import Optional, Tuple, List
from pydantic import ValidationError
from tabulate import tabulate

from ..config.settings import get_settings
from ..errors import NetEstimateError
from ..estimator.base import NetworkEstimator
from ..models.frame import Frame
from ..models.params import ServiceParams
from ..sampling.counters import filter_io_counters
from ..sampling.sampler import ContinuousSampler
from ..utils.formatters import (
    format_results,
    format_records_csv,
    format_windows_summary,
    format_sweep_table,
    format_frame,
    format_percent,
    format_b,
    to_json,
)
from ..utils.logging import setup_logging
from ..utils.units import Byte, KILOMETER, Mb, MB, SECOND

DEFAULT_LINK_DISTANCE = 1500 * KILOMETER
DEFAULT_DATA_RATE = 200 * Mb / SECOND
DEFAULT_PACKET_SIZE = 4 * MB
DEFAULT_PACKETS = 5
DEFAULT_LABEL = "dummy.label"


@click.group()
@click.version_option(version="0.1.0", prog_name="net-estimate")
@click.option("--log-level", default=None, help="日志级别 (DEBUG/INFO/WARNING/ERROR)")
@click.option("--log-file", type=click.Path(), default=None, help="日志文件路径")
def cli(log_level: Optional[str], log_file: Optional[str]):
    """链路性能估算工具

    使用传输/传播时延、RTT、M/M/1排队模型估算链路性能，
    并支持对本机网络接口流量进行实时采样。
    """
    settings = get_settings()
    setup_logging(log_level or settings.log_level, log_file or settings.log_file)


def _emit(text: str, output_file: Optional[str]) -> None:
    """输出到文件或终端"""
    if output_file:
        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(text)
        click.echo(f"结果已保存到: {output_file}")
    else:
        click.echo(text)


def _parse_link(value: str) -> ServiceParams:
    """解析 label:distance_m:data_rate_bps:packet_size_b:packets[:lambda[:mu]]"""
    parts = value.split(":")
    if len(parts) not in (5, 6, 7):
        raise click.BadParameter(
            f"链路格式应为 label:distance_m:data_rate_bps:packet_size_b:packets[:lambda[:mu]]，得到: {value}"
        )
    estimator = NetworkEstimator()
    try:
        return estimator.build_params(
            distance_m=float(parts[1]),
            data_rate_bps=float(parts[2]),
            packet_size_b=float(parts[3]),
            packets=int(parts[4]),
            label=parts[0],
            arrival_rate_pps=float(parts[5]) if len(parts) > 5 else None,
            service_rate_pps=float(parts[6]) if len(parts) > 6 else None,
        )
    except (ValueError, ValidationError) as e:
        raise click.BadParameter(f"无效的链路参数 {value}: {e}")


def _link_callback(ctx, param, values: Tuple[str, ...]) -> List[ServiceParams]:
    return [_parse_link(value) for value in values]


def _default_format(*choices: str):
    """配置中的默认输出格式；命令不支持该格式时使用table"""

    def default() -> str:
        format_type = get_settings().default_output_format
        return format_type if format_type in choices else "table"

    return default


@cli.command()
@click.option("--label", "-l", default=DEFAULT_LABEL, help="链路标签")
@click.option("--distance", "-d", type=float, default=DEFAULT_LINK_DISTANCE, help="链路距离(米)")
@click.option("--data-rate", "-r", type=float, default=DEFAULT_DATA_RATE, help="数据速率(bit/s)")
@click.option("--packet-size", "-s", type=float, default=DEFAULT_PACKET_SIZE, help="包大小(bit)")
@click.option("--packets", "-n", type=int, default=DEFAULT_PACKETS, help="包数量")
@click.option("--arrival-rate", type=float, default=None, help="到达率λ(pkt/s)，默认取配置")
@click.option("--service-rate", type=float, default=None, help="服务率μ(pkt/s)，默认为 R/L")
@click.option("--output-file", type=click.Path(), help="输出文件路径")
@click.option("--format", "-f", default=_default_format("table", "json", "csv"),
              type=click.Choice(["table", "json", "csv"]), help="输出格式，默认取配置")
@click.option("--verbose", "-v", is_flag=True, help="显示时延分量")
def estimate(label: str, distance: float, data_rate: float, packet_size: float, packets: int,
             arrival_rate: Optional[float], service_rate: Optional[float],
             output_file: Optional[str], format: str, verbose: bool):
    """估算单条链路的时延与服务时间"""
    try:
        estimator = NetworkEstimator()
        params = estimator.build_params(distance, data_rate, packet_size, packets, label,
                                        arrival_rate, service_rate)
        result = estimator.estimate(params)
        _emit(format_results(result, format, verbose), output_file)

    except (NetEstimateError, ValidationError) as e:
        click.echo(f"错误: {e}", err=True)
        raise click.Abort()


@cli.command()
@click.option("--mode", type=click.Choice(["lambda", "mu"]), default="lambda",
              help="扫描到达率(lambda)或服务率(mu)")
@click.option("--data-rate", "-r", type=float, default=DEFAULT_DATA_RATE, help="数据速率(bit/s)")
@click.option("--packet-size", "-s", type=float, default=DEFAULT_PACKET_SIZE, help="包大小(bit)")
@click.option("--arrival-rate", type=float, default=None, help="固定的到达率λ（mu模式）")
@click.option("--steps", type=int, default=20, help="lambda模式下每个μ划分的步数")
@click.option("--max-ratio", type=float, default=1.2, help="lambda模式下λ/μ的最大值")
@click.option("--max-mu", type=float, default=100.0, help="mu模式下μ的上限")
@click.option("--mu-step", type=float, default=10.0, help="mu模式下μ的步长")
@click.option("--format", "-f", default=_default_format("table", "json"),
              type=click.Choice(["table", "json"]), help="输出格式，默认取配置")
def sweep(mode: str, data_rate: float, packet_size: float, arrival_rate: Optional[float],
          steps: int, max_ratio: float, max_mu: float, mu_step: float, format: str):
    """扫描M/M/1排队时延随λ或μ的变化"""
    try:
        estimator = NetworkEstimator()
        if mode == "lambda":
            mu = data_rate / packet_size
            rows = estimator.sweep_arrival_rate(mu, steps=steps, max_ratio=max_ratio)
        else:
            lam = estimator.settings.default_arrival_rate_pps if arrival_rate is None else arrival_rate
            rows = estimator.sweep_service_rate(lam, max_service_rate_pps=max_mu, step=mu_step)
    except ValueError as e:
        click.echo(f"错误: {e}", err=True)
        raise click.Abort()

    if format == "json":
        click.echo(to_json(rows))
    else:
        click.echo(format_sweep_table(rows))
        click.echo("\nλ: 到达率  μ: 服务率  ρ = λ/μ  Wq = ρ/(μ-λ)  W = Wq + 1/μ")


@cli.command()
@click.option("--link", "links", multiple=True, required=True, callback=_link_callback,
              help="链路描述 label:distance_m:data_rate_bps:packet_size_b:packets[:lambda[:mu]]，可重复")
@click.option("--output-file", type=click.Path(), help="输出文件路径")
@click.option("--format", "-f", default=_default_format("table", "json", "csv"),
              type=click.Choice(["table", "json", "csv"]), help="输出格式，默认取配置")
def utilization(links: List[ServiceParams], output_file: Optional[str], format: str):
    """汇总多条链路的持久/非持久连接利用率"""
    try:
        estimator = NetworkEstimator()
        result = estimator.estimate_utilization(links)
    except NetEstimateError as e:
        click.echo(f"错误: {e}", err=True)
        raise click.Abort()

    records = result["network_metrics"]["transmission_log"]
    if format == "json":
        text = to_json(result)
    elif format == "csv":
        text = format_records_csv(records)
    else:
        metrics = result["network_metrics"]
        lines = [
            format_windows_summary(records),
            "",
            f"利用率(持久连接): {format_percent(result['persistent_utilization'])}",
            f"利用率(非持久连接): {format_percent(result['non_persistent_utilization'])}",
            f"平均RTT: {metrics['network_latency']:.3f} ms, 抖动: {metrics['network_jitter']:.3f} ms",
            f"带宽: {metrics['network_bandwidth']:.2f} Mbps, 有效速率: {metrics['network_speed']:.2f} Mbps",
        ]
        text = "\n".join(lines)
    _emit(text, output_file)


@cli.command()
@click.option("--label", "-l", default="all", help="帧标签")
@click.option("--duration", "-t", type=float, default=None, help="采样时长(秒)，默认取配置")
@click.option("--interface", "-i", "interfaces", multiple=True, help="接口名子串过滤，可重复")
@click.option("--format", "-f", default=_default_format("table", "json"),
              type=click.Choice(["table", "json"]), help="输出格式，默认取配置")
def sample(label: str, duration: Optional[float], interfaces: Tuple[str, ...], format: str):
    """对本机网络流量采样一次"""
    estimator = NetworkEstimator()
    try:
        frame = estimator.sample(label, duration, interfaces)
    except ValueError as e:
        click.echo(f"错误: {e}", err=True)
        raise click.Abort()

    if frame is None:
        click.echo("错误: 无法读取网络计数器", err=True)
        raise click.Abort()

    if format == "json":
        click.echo(to_json(frame.to_dict()))
    else:
        click.echo(format_frame(frame.to_dict()))


@cli.command()
@click.option("--interval", type=float, default=None, help="采样间隔(秒)，默认取配置")
@click.option("--count", "-c", type=int, default=None, help="采样次数，默认直到Ctrl-C")
@click.option("--interface", "-i", "interfaces", multiple=True, help="接口名子串过滤，可重复")
def monitor(interval: Optional[float], count: Optional[int], interfaces: Tuple[str, ...]):
    """持续采样本机网络流量，Ctrl-C停止"""

    def show(frame: Frame) -> None:
        click.echo(
            f"{frame.timestamp:%H:%M:%S} 上行: {format_b(frame.upload_bps)}/s, "
            f"下行: {format_b(frame.download_bps)}/s, "
            f"包速率: {frame.pkts_up_pps + frame.pkts_down_pps:.2f} pkt/s"
        )

    if interval is None:
        interval = get_settings().monitor_interval_s
    try:
        sampler = ContinuousSampler(
            interval_s=interval,
            interfaces=interfaces,
            on_frame=show,
            max_ticks=count,
        )
    except ValueError as e:
        click.echo(f"错误: {e}", err=True)
        raise click.Abort()

    try:
        sampler.run()
    except KeyboardInterrupt:
        sampler.stop()
        click.echo("\n已停止采样")


@cli.command(name="interfaces")
@click.option("--interface", "-i", "interfaces", multiple=True, help="接口名子串过滤，可重复")
def list_interfaces(interfaces: Tuple[str, ...]):
    """列出网络接口的累计计数"""
    stats = filter_io_counters(True, *interfaces)
    if stats is None:
        click.echo("错误: 无法读取网络计数器", err=True)
        raise click.Abort()

    table_data = [
        [stat.name, format_b(stat.bytes_sent * Byte), format_b(stat.bytes_recv * Byte),
         stat.packets_sent, stat.packets_recv]
        for stat in stats
    ]
    headers = ["接口", "已发送", "已接收", "发送包数", "接收包数"]
    click.echo(tabulate(table_data, headers=headers, tablefmt="grid"))


def main():
    """主程序入口"""
    cli()
