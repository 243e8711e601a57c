# -*- coding: utf-8 -*-
"""
功能: 配置与日志模块。
      定义模拟器的不可变配置模型，并负责从 JSON 配置文件加载配置、配置全局日志系统。

配置来源 (优先级由低到高):
1. `SimulatorConfig` 中的默认值。
2. 通过 `--config` 指定的 JSON 文件，键名与字段名一致。
3. 命令行参数。
"""

import json
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gprmc_emulator.time_source import TimeSpec, parse_time_spec

DEFAULT_PORT = '/dev/ttyAMA0'
DEFAULT_POSITION = '5220.531,N,00011.797,E'
PARITY_NAMES = ('none', 'even', 'odd', 'mark', 'space')
STOPBITS_VALUES = (1, 2)

LOG_FORMAT = '%(asctime)s - %(levelname)s - [%(module)s:%(lineno)d] - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ConfigFileError(ValueError):
    """配置文件内容不是有效的配置对象。"""

# =============================================================================
# 日志系统配置
# =============================================================================
def setup_logging(log_level_str: str):
    """
    根据给定的级别字符串配置全局日志记录器。

    参数:
        log_level_str (str): 日志级别字符串，例如 "INFO", "DEBUG", "WARNING", "ERROR"。
    """
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    # 移除所有现有的处理器，以避免重复记录
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    logging.basicConfig(level=log_level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    logging.debug(f"日志系统已配置，级别为: {log_level_str}")

# =============================================================================
# 配置模型 (Pydantic)
# =============================================================================
class SimulatorConfig(BaseModel):
    """
    模拟器配置，启动时加载一次，此后不可修改。

    属性:
        delay (int): 两次发送之间的间隔 (秒)。
        loop (bool): True 表示持续发送，False 表示只发送一次。
        verbose (bool): 是否在控制台回显每条语句。
        port (str): 串行端口路径。
        baudrate (int): 波特率。
        parity (str): 校验位，取值 none/even/odd/mark/space。
        stopbits (int): 停止位，1 或 2。
        time (str): 时间规格，"now" 表示实时时钟。
        where (str): 固定位置字段 "纬度,N/S,经度,E/W"，原样写入语句。
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    delay: int = Field(default=1, ge=0)
    loop: bool = True
    verbose: bool = False
    port: str = Field(default=DEFAULT_PORT, min_length=1)
    baudrate: int = Field(default=4800, gt=0)
    parity: str = 'none'
    stopbits: int = 1
    time: str = 'now'
    where: str = DEFAULT_POSITION

    @field_validator('parity')
    @classmethod
    def _check_parity(cls, value: str) -> str:
        value = value.lower()
        if value not in PARITY_NAMES:
            raise ValueError(f"不支持的校验位: {value}，可选值为 {', '.join(PARITY_NAMES)}")
        return value

    @field_validator('stopbits')
    @classmethod
    def _check_stopbits(cls, value: int) -> int:
        if value not in STOPBITS_VALUES:
            raise ValueError(f"不支持的停止位: {value}，只能是 1 或 2")
        return value

    @field_validator('time')
    @classmethod
    def _check_time(cls, value: str) -> str:
        # TimeSpecError 是 ValueError 的子类，pydantic 会将其转换为 ValidationError
        parse_time_spec(value)
        return value

    @field_validator('where')
    @classmethod
    def _check_where(cls, value: str) -> str:
        if not value.isascii():
            raise ValueError(f"位置只能包含ASCII字符: {value!r}")
        if len(value.split(',')) != 4:
            raise ValueError(f"位置必须包含4个逗号分隔的字段: {value!r}")
        return value

    @property
    def time_spec(self) -> TimeSpec:
        return parse_time_spec(self.time)

# =============================================================================
# 配置加载
# =============================================================================
def load_config(config_path: Optional[str] = None, **overrides: Any) -> SimulatorConfig:
    """
    加载模拟器配置。

    参数:
        config_path (str, optional): JSON 配置文件路径；为 None 时只使用默认值。
        **overrides: 命令行等来源的覆盖值，值为 None 的项会被忽略。

    返回:
        SimulatorConfig: 不可变的配置对象。
    """
    values: Dict[str, Any] = {}
    if config_path:
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            logging.info(f"成功加载配置文件: {config_path}")
        except FileNotFoundError:
            logging.error(f"配置文件未找到: {config_path}")
            raise
        except (json.JSONDecodeError, UnicodeDecodeError):
            logging.error(f"配置文件格式错误: {config_path}")
            raise

        # 顶层必须是 JSON 对象
        if not isinstance(data, dict):
            raise ConfigFileError(f"配置文件顶层必须是 JSON 对象: {config_path}")
        values.update(data)

    values.update({key: value for key, value in overrides.items() if value is not None})
    return SimulatorConfig(**values)
