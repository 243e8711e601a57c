# -*- coding: utf-8 -*-
"""
功能: NMEA语句构建模块。
      提供生成 NMEA 0183 标准 $GPRMC 语句所需的全部纯函数，
      包括时间/日期字段格式化、校验和计算以及完整语句的组帧。

主要功能:
- `calculate_checksum`: 对 '$' 与 '*' 之间的语句主体做逐字节异或。
- `build_sentence`: 根据时间戳和固定位置生成带 CRLF 结尾的完整语句。
- `verify_sentence`: 重新计算已生成语句的校验和，用于回环校验。

本模块不访问任何全局状态，所有输入均通过参数传入。
"""

import datetime

TALKER_SENTENCE = 'GPRMC'
STATUS_ACTIVE = 'A'
SPEED_KNOTS = '0.0'
TRACK_DEG = '0.0'
MODE_INDICATOR = 'A'
SENTENCE_TERMINATOR = '\r\n'

# =============================================================================
# 时间戳格式化辅助函数
# =============================================================================
def format_nmea_time(timestamp: datetime.datetime) -> str:
    """
    将时间戳格式化为 HHMMSS.000。
    亚秒部分始终输出为 .000，本系统从不报告亚秒精度。
    """
    return "{:02d}{:02d}{:02d}.000".format(timestamp.hour, timestamp.minute, timestamp.second)


def format_nmea_date(timestamp: datetime.datetime) -> str:
    """将时间戳格式化为 DDMMYY (两位年份)。"""
    return "{:02d}{:02d}{:02d}".format(timestamp.day, timestamp.month, timestamp.year % 100)

# =============================================================================
# 校验和
# =============================================================================
def calculate_checksum(payload: str) -> str:
    """
    计算NMEA校验和。

    参数:
        payload (str): '$' 与 '*' 之间的语句主体，例如 "GPRMC,123519.000,A,..."。

    返回:
        str: 两位小写十六进制校验和，例如 "0a"。
    """
    checksum = 0
    for char in payload:
        checksum ^= ord(char) # 对每个字符的ASCII值进行异或操作
    return "{:02x}".format(checksum & 0xFF)

# =============================================================================
# 语句构建
# =============================================================================
def build_payload(timestamp: datetime.datetime, position: str) -> str:
    """
    组合 $GPRMC 语句主体 (不含 '$'、'*' 和校验和)。

    参数:
        timestamp (datetime.datetime): 本次发送使用的时间戳。
        position (str): 固定位置字段 "纬度,N/S,经度,E/W"，原样拼接，不做解析。

    返回:
        str: 语句主体。
    """
    # GPRMC,时间,状态,位置(4个字段),速度,航向,日期,磁偏角(空),模式
    fields = [
        TALKER_SENTENCE,
        format_nmea_time(timestamp),
        STATUS_ACTIVE,
        position,
        SPEED_KNOTS,
        TRACK_DEG,
        format_nmea_date(timestamp),
        '',
        MODE_INDICATOR,
    ]
    return ','.join(fields)


def build_sentence(timestamp: datetime.datetime, position: str) -> str:
    """
    根据时间戳和固定位置，创建一条完整的 $GPRMC NMEA语句。

    参数:
        timestamp (datetime.datetime): 时间戳，只使用时、分、秒、日、月和两位年份。
        position (str): 固定位置字段，例如 "5220.531,N,00011.797,E"。

    返回:
        str: 以 '$' 开头、以 CRLF 结尾的完整语句。
             例如: "$GPRMC,123519.000,A,4807.038,N,01131.000,E,0.0,0.0,230394,,A*42\\r\\n"
    """
    payload = build_payload(timestamp, position)
    return "${0}*{1}{2}".format(payload, calculate_checksum(payload), SENTENCE_TERMINATOR)


def verify_sentence(sentence: str) -> bool:
    """
    检查一条已组帧语句内嵌的校验和是否与其主体重新计算的结果一致。
    结尾的 CRLF 可有可无；格式不符时返回 False。
    """
    line = sentence.rstrip('\r\n')
    if not line.startswith('$') or line.count('*') != 1:
        return False
    payload, checksum = line[1:].split('*')
    return calculate_checksum(payload) == checksum.lower()
