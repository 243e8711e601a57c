# -*- coding: utf-8 -*-
"""
功能: GPRMC GPS接收机模拟器。
      通过串行端口定时发送 NMEA 0183 $GPRMC 语句。
"""

__version__ = '1.0.0'
