# -*- coding: utf-8 -*-
"""
功能: 时间戳来源模块。
      负责把操作员提供的时间规格解析为 `TimeSpec`，并在每次发送前给出本次使用的时间戳。

支持的时间规格:
- "now": 读取系统UTC时钟。
- "HH:MM:SS" 或 "HH:MM": 固定时刻，日期取当前UTC日历日期。
- "YYYY-MM-DD HH:MM[:SS]" / "YYYY-MM-DDTHH:MM[:SS]": 固定日期和时刻，原样使用。
- "DD/MM/YYYY HH:MM[:SS]": 固定日期和时刻 (日在前)。
"""

import datetime
from dataclasses import dataclass
from typing import Optional

LIVE_CLOCK_SPEC = 'now'

# 仅时刻的格式
_TIME_OF_DAY_FORMATS = ('%H:%M:%S', '%H:%M')
# 带日期的格式
_DATE_TIME_FORMATS = (
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%d %H:%M',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%dT%H:%M',
    '%d/%m/%Y %H:%M:%S',
    '%d/%m/%Y %H:%M',
)


class TimeSpecError(ValueError):
    """时间规格无法解析为有效时间戳。"""


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass(frozen=True)
class TimeSpec:
    """
    已解析的时间规格。

    属性:
        time_of_day (datetime.time | None): 固定时刻；为 None 时使用实时时钟。
        date (datetime.date | None): 固定日期；为 None 时使用当前日历日期。
    """
    time_of_day: Optional[datetime.time] = None
    date: Optional[datetime.date] = None

    @property
    def is_live(self) -> bool:
        return self.time_of_day is None

    def resolve(self, now: datetime.datetime) -> datetime.datetime:
        """
        给出本次发送使用的时间戳。

        参数:
            now (datetime.datetime): 当前系统时间 (UTC)。

        返回:
            datetime.datetime: 去掉亚秒部分的时间戳。
        """
        if self.is_live:
            return now.replace(microsecond=0)
        day = self.date if self.date is not None else now.date()
        return datetime.datetime.combine(day, self.time_of_day)


def parse_time_spec(text: str) -> TimeSpec:
    """
    解析操作员提供的时间规格字符串。

    参数:
        text (str): 时间规格，例如 "now"、"12:35:19" 或 "1994-03-23 12:35:19"。

    返回:
        TimeSpec: 解析结果。

    异常:
        TimeSpecError: 字符串不符合任何受支持的格式。
    """
    spec = (text or '').strip()
    if spec.lower() == LIVE_CLOCK_SPEC:
        return TimeSpec()

    for fmt in _TIME_OF_DAY_FORMATS:
        try:
            parsed = datetime.datetime.strptime(spec, fmt)
        except ValueError:
            continue
        return TimeSpec(time_of_day=parsed.time())

    for fmt in _DATE_TIME_FORMATS:
        try:
            parsed = datetime.datetime.strptime(spec, fmt)
        except ValueError:
            continue
        return TimeSpec(time_of_day=parsed.time(), date=parsed.date())

    raise TimeSpecError(f"无法解析时间规格: {text!r}")
