# -*- coding: utf-8 -*-
"""
功能: 串行端口传输模块。
      负责按配置打开并设置串行端口，以及诊断系统上可用的串行端口。
"""

import logging

import serial
import serial.tools.list_ports

from gprmc_emulator.config import SimulatorConfig

logger = logging.getLogger(__name__)

PARITY_MAP = {
    'none': serial.PARITY_NONE,
    'even': serial.PARITY_EVEN,
    'odd': serial.PARITY_ODD,
    'mark': serial.PARITY_MARK,
    'space': serial.PARITY_SPACE,
}

STOPBITS_MAP = {
    1: serial.STOPBITS_ONE,
    2: serial.STOPBITS_TWO,
}


class TransportError(RuntimeError):
    """串行端口无法打开或配置。"""

    def __init__(self, port: str, reason: str):
        super().__init__(f"无法打开串行端口 {port}: {reason}")
        self.port = port


def open_serial_port(config: SimulatorConfig) -> serial.Serial:
    """
    按配置打开串行端口。

    参数:
        config (SimulatorConfig): 包含端口路径、波特率、校验位和停止位的配置。

    返回:
        serial.Serial: 已打开的串口对象，调用方负责关闭。

    异常:
        TransportError: 端口不存在、被占用或参数不被支持。
    """
    try:
        ser = serial.Serial(
            port=config.port,
            baudrate=config.baudrate,
            bytesize=serial.EIGHTBITS,
            parity=PARITY_MAP[config.parity],
            stopbits=STOPBITS_MAP[config.stopbits],
            timeout=1,
        )
    except (serial.SerialException, ValueError) as e:
        raise TransportError(config.port, str(e)) from e

    logger.info(f"成功打开端口 {config.port} ({config.baudrate} 波特, 校验位 {config.parity}, 停止位 {config.stopbits})")
    return ser


def list_available_ports():
    """
    扫描系统上所有可用的串行端口，并尝试打开和关闭每个端口以测试其可用性。

    返回:
        list[tuple[str, str, str]]: 每个端口的 (设备, 描述, 状态) 元组。
    """
    results = []
    for port_info in sorted(serial.tools.list_ports.comports()):
        ser = None
        try:
            ser = serial.Serial(port_info.device)
            status = '可用'
        except serial.SerialException as e:
            # 区分“已被占用”和其他错误
            if "Access is denied" in str(e) or "busy" in str(e) or "already in use" in str(e):
                status = '不可用 (端口已被占用)'
            else:
                status = f'错误 ({e})'
        finally:
            if ser and ser.is_open:
                ser.close()
        results.append((port_info.device, port_info.description, status))
    return results
