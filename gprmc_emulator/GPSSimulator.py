# -*- coding: utf-8 -*-
"""
功能: GPS接收机模拟器。
      本脚本作为一个独立的命令行工具，模拟一台GPS接收机，
      通过串行端口定时发送 $GPRMC 语句，供依赖GPS授时的下游设备 (例如GPS同步时钟) 测试使用。

主要功能:
- 使用系统UTC时间或操作员指定的固定时间生成时间戳。
- 将时间戳与固定位置格式化为包含校验和的 $GPRMC 语句。
- 按指定间隔持续发送，或只发送一次。
- 可选地在控制台回显每条语句。
"""

import argparse
import logging
import signal
import sys
import threading
from typing import Callable, Optional

import serial
from pydantic import ValidationError

from gprmc_emulator.config import PARITY_NAMES, SimulatorConfig, load_config, setup_logging
from gprmc_emulator.time_source import utc_now
from gprmc_emulator.transport import TransportError, list_available_ports, open_serial_port
from gprmc_emulator.utils import build_sentence

logger = logging.getLogger(__name__)

# =============================================================================
# 模拟器主循环
# =============================================================================
def _echo(line: str):
    # 回显须先于串口写入到达控制台
    print(line, flush=True)


def run_simulator(config: SimulatorConfig, transport, clock: Callable = utc_now,
                  stop_event: Optional[threading.Event] = None, max_count: Optional[int] = None,
                  console: Optional[Callable[[str], None]] = None) -> int:
    """
    运行GPS模拟器的发送循环。

    每次迭代依次: 获取时间戳、生成语句、(verbose 模式下) 回显到控制台、写入串口。
    持续模式下，两次迭代之间等待 `config.delay` 秒；若 `stop_event` 被设置，则立即结束等待并退出。

    参数:
        config (SimulatorConfig): 模拟器配置。
        transport: 具有 `write(bytes)` 方法的输出端，通常是 `serial.Serial`。
        clock (Callable, optional): 返回当前UTC时间的函数。
        stop_event (threading.Event, optional): 停止信号。
        max_count (int, optional): 最多发送的语句条数；为 None 时不限制。
        console (Callable, optional): 控制台输出函数，默认为 `_echo`。

    返回:
        int: 实际写入的语句条数。

    异常:
        serial.SerialException: 写入串口失败时原样抛出。
    """
    time_spec = config.time_spec
    if stop_event is None:
        stop_event = threading.Event()
    if console is None:
        console = _echo

    sent = 0
    while not stop_event.is_set():
        if max_count is not None and sent >= max_count:
            break
        timestamp = time_spec.resolve(clock())
        sentence = build_sentence(timestamp, config.where)

        # 控制台回显先于串口写入
        if config.verbose:
            console(sentence.rstrip('\r\n'))
        transport.write(sentence.encode('ascii'))
        sent += 1
        logger.debug(f"已发送第 {sent} 条语句: {sentence.rstrip()}")

        if not config.loop:
            break
        if max_count is not None and sent >= max_count:
            break
        # 等待指定间隔，如果停止事件被设置，则立即停止等待
        stop_event.wait(config.delay)

    return sent

# =============================================================================
# 命令行接口
# =============================================================================
def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"必须是正整数: {text}")
    return value


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='gprmc-emulator',
        description='通过串行端口定时发送 NMEA $GPRMC 语句，模拟GPS接收机。',
    )
    # 默认值为 None，表示“未在命令行指定”，由配置文件或模型默认值决定
    parser.add_argument('--config', help='JSON 配置文件路径')
    parser.add_argument('--delay', type=int, help='两次发送之间的间隔秒数 (默认 1)')
    parser.add_argument('--port', help='串行端口路径 (默认 /dev/ttyAMA0)')
    parser.add_argument('--verbose', action=argparse.BooleanOptionalAction, default=None,
                        help='在控制台回显每条语句')
    parser.add_argument('--time', help='固定时间，例如 "12:35:19" 或 "1994-03-23 12:35:19"；"now" 表示实时时钟')
    parser.add_argument('--loop', action=argparse.BooleanOptionalAction, default=None,
                        help='持续发送 (默认) 或只发送一次 (--no-loop)')
    parser.add_argument('--baudrate', type=int, help='波特率 (默认 4800)')
    parser.add_argument('--parity', choices=PARITY_NAMES, help='校验位 (默认 none)')
    parser.add_argument('--stopbits', type=int, choices=(1, 2), help='停止位 (默认 1)')
    parser.add_argument('--where', help='固定位置字段，例如 "5220.531,N,00011.797,E"')
    parser.add_argument('--count', type=_positive_int, help='发送指定条数后退出')
    parser.add_argument('--log-level', default='INFO', help='日志级别 (默认 INFO)')
    parser.add_argument('--list-ports', action='store_true', help='列出可用的串行端口并退出')
    return parser


def print_available_ports():
    ports = list_available_ports()
    print("--- 串口诊断工具 ---")
    if not ports:
        print("未检测到任何活动的串口。")
        return
    for device, description, status in ports:
        print("-" * 25)
        print(f"  设备: {device}")
        print(f"  描述: {description}")
        print(f"  状态: {status}")
    print("-" * 25)


def main(argv=None) -> int:
    """
    命令行入口。

    返回:
        int: 进程退出码。0 表示正常结束，1 表示串口错误，2 表示配置错误。
    """
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level)

    if args.list_ports:
        print_available_ports()
        return 0

    try:
        config = load_config(
            args.config,
            delay=args.delay,
            port=args.port,
            verbose=args.verbose,
            time=args.time,
            loop=args.loop,
            baudrate=args.baudrate,
            parity=args.parity,
            stopbits=args.stopbits,
            where=args.where,
        )
    except ValidationError as e:
        logger.error(f"配置无效: {e}")
        return 2
    except (OSError, ValueError) as e:
        logger.error(f"无法读取配置文件: {e}")
        return 2

    logger.info("--- GPS模拟器已启动 ---")
    logger.info(f"配置信息: 端口={config.port}, 波特率={config.baudrate}, 间隔={config.delay} 秒, "
                f"时间={config.time}, 位置={config.where}, 持续发送={config.loop}")

    try:
        ser = open_serial_port(config)
    except TransportError as e:
        logger.error(str(e))
        return 1

    stop_event = threading.Event()
    if threading.current_thread() is threading.main_thread():
        signal.signal(signal.SIGTERM, lambda signum, frame: stop_event.set())

    sent = 0
    try:
        with ser:
            sent = run_simulator(config, ser, stop_event=stop_event, max_count=args.count)
    except serial.SerialException as e:
        logger.error(f"写入串行端口 {config.port} 失败: {e}")
        return 1
    except KeyboardInterrupt:
        stop_event.set()
        logger.info("--- 模拟器已被用户手动停止 ---")
        return 0

    logger.info(f"--- 模拟器已结束，共发送 {sent} 条语句 ---")
    return 0

# =============================================================================
# 脚本执行入口
# =============================================================================
if __name__ == '__main__':
    sys.exit(main())
