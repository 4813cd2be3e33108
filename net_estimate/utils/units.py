"""
单位常量定义

比特/字节的十进制（SI）与二进制（Ibi）倍数，以及时间、距离单位。
所有数据量均以比特为基本单位，距离以米为基本单位，时间以秒为基本单位。
"""

from enum import Enum

# 数据量（以比特为基本单位）
Bit = 1.0
Byte = 8 * Bit
Kb = 1000 * Bit    # Kilobit
KB = 1000 * Byte   # Kilobyte
Mb = 1000 * Kb     # Megabit
MB = 1000 * KB     # Megabyte
Gb = 1000 * Mb     # Gigabit
GB = 1000 * MB     # Gigabyte
Tb = 1000 * Gb     # Terabit
TB = 1000 * GB     # Terabyte
Pb = 1000 * Tb     # Petabit
PB = 1000 * TB     # Petabyte

KiB = 1024 * Byte  # Kibibyte
MiB = 1024 * KiB   # Mebibyte
GiB = 1024 * MiB   # Gibibyte
TiB = 1024 * GiB   # Tebibyte
PiB = 1024 * TiB   # Pebibyte

# 距离（米）
METER = 1.0
KILOMETER = 1000 * METER

# 时间（秒）
SECOND = 1.0
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY
MONTH = 30 * DAY
YEAR = 365 * DAY

# 传播速度（米/秒）
PROPAGATION_SPEED_ACTUAL = 299792458.0  # 真空光速
PROPAGATION_SPEED_APPROX = 300000000.0  # 近似值


class DelayType(Enum):
    """时延分量枚举"""
    DELAY = "delay"                  # 总时延（M/M/1系统时间）
    PROPAGATION = "propagation"      # 传播时延
    TRANSMISSION = "transmission"    # 传输时延
    PROCESSING = "processing"        # 处理时延
    QUEUEING = "queueing"            # 排队时延
