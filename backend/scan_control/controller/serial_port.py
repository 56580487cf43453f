"""
串口连接 - 按配置打开按钮盒串口

固定链路参数：9600 波特、8 数据位、1 停止位、无校验、读超时 1000ms
"""

from __future__ import annotations

import logging

import serial

from ..config import SerialConfig
from ..interfaces import ListenerError

logger = logging.getLogger(__name__)


def open_serial_port(config: SerialConfig) -> serial.Serial:
    """打开串口；失败抛 ListenerError"""
    try:
        port = serial.Serial(
            port=config.port,
            baudrate=config.baudrate,
            bytesize=config.bytesize,
            stopbits=config.stopbits,
            parity=config.parity,
            timeout=config.read_timeout_ms / 1000.0,
        )
    except (serial.SerialException, ValueError) as e:
        raise ListenerError(f"串口打开失败: {config.port}: {e}") from e

    logger.info("串口已打开: %s @ %d", config.port, config.baudrate)
    return port
