#!/usr/bin/env python3
"""
Net-Estimate 基本使用示例

演示如何估算链路时延、汇总多链路利用率，并对本机流量采样一次。
"""

from net_estimate import NetworkEstimator, compute_utilization
from net_estimate.utils import setup_logging, format_b
from net_estimate.utils.units import KILOMETER, Mb, MB, SECOND


def main():
    """主函数"""
    setup_logging("INFO")
    print("=== Net-Estimate 基本使用示例 ===\n")

    estimator = NetworkEstimator()

    # 1. 三条链路
    links = [
        estimator.build_params(1500 * KILOMETER, 200 * Mb / SECOND, 4 * MB, 5, "[ 1 ]"),
        estimator.build_params(600 * KILOMETER, 500 * Mb / SECOND, 10 * MB, 2, "[ 2 ]"),
        estimator.build_params(1200 * KILOMETER, 100 * Mb / SECOND, 8 * Mb, 3, "[ 3 ]"),
    ]

    # 2. 逐条估算
    windows = []
    for params in links:
        window = estimator.estimate_window(params)
        windows.append(window)
        print(f"链路 {params.iface}:")
        print(f"  处理比特数: {format_b(window.bits_processed)}")
        print(f"  RTT: {window.rtt:.5f} s")
        print(f"  M/M/1系统时间: {window.average_system_time_mm1:.5f} s")
        print(f"  持久/非持久服务时间: {window.persistent_service_time:.5f} s / "
              f"{window.non_persistent_service_time:.5f} s")

    # 3. 利用率
    utilization, n_utilization = compute_utilization(*windows)
    print(f"\n利用率(持久连接): {utilization * 100:.2f}%")
    print(f"利用率(非持久连接): {n_utilization * 100:.2f}%")

    # 4. 实时采样
    frame = estimator.sample("all", 1.0)
    if frame is None:
        print("\n无法读取网络计数器")
    else:
        print(f"\n上行: {format_b(frame.upload_bps)}/s, 下行: {format_b(frame.download_bps)}/s")

    print("\n=== 示例完成 ===")


if __name__ == "__main__":
    main()
