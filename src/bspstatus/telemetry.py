"""Telemetry - 统一日志和指标入口

Logging factory plus a small metrics facade.

日志格式: [module] msg
指标示例: parser.lines, parser.errors, parser.unknown_marker, source.read_errors
"""

import logging

from bspstatus import config

# 全局日志配置
_LOG_FORMAT = "[%(name)s] %(message)s"


def get_logger(name: str) -> logging.Logger:
    """获取带模块前缀的 logger

    Args:
        name: 模块名（通常使用 __name__）

    Returns:
        Logger 实例
    """
    return logging.getLogger(name)


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger with the bspstatus format.

    Args:
        level: Level name; defaults to config.LOG_LEVEL.
    """
    logging.basicConfig(level=(level or config.LOG_LEVEL).upper(), format=_LOG_FORMAT)


def truncate_line(line: str, limit: int = config.LOG_MAX_LINE_LEN) -> str:
    """Shorten a report line for log output."""
    line = line.rstrip("\r\n")
    if len(line) <= limit:
        return line
    return line[:limit] + "..."


class Metrics:
    """指标收集 facade

    提供简单的计数器和 gauge 接口，内存存储。
    """

    def __init__(self):
        self._counters: dict[str, int] = {}
        self._gauges: dict[str, float] = {}

    def inc(self, name: str, labels: dict[str, str] | None = None, value: int = 1) -> None:
        """递增计数器

        Args:
            name: 指标名（如 "parser.errors"）
            labels: 可选标签（如 {"marker": "T"}）
            value: 递增值，默认 1
        """
        key = self._make_key(name, labels)
        self._counters[key] = self._counters.get(key, 0) + value

    def gauge(self, name: str, value: float, labels: dict[str, str] | None = None) -> None:
        """设置 gauge 值"""
        key = self._make_key(name, labels)
        self._gauges[key] = value

    def get_counter(self, name: str, labels: dict[str, str] | None = None) -> int:
        """获取计数器值（用于测试）"""
        return self._counters.get(self._make_key(name, labels), 0)

    def get_gauge(self, name: str, labels: dict[str, str] | None = None) -> float:
        """获取 gauge 值（用于测试）"""
        return self._gauges.get(self._make_key(name, labels), 0.0)

    def reset(self) -> None:
        """重置所有指标（用于测试）"""
        self._counters.clear()
        self._gauges.clear()

    def _make_key(self, name: str, labels: dict[str, str] | None) -> str:
        if not labels:
            return name
        label_str = ",".join(f"{k}={v}" for k, v in sorted(labels.items()))
        return f"{name}{{{label_str}}}"


# 全局指标实例
metrics = Metrics()
