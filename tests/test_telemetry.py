"""Telemetry 模块测试"""

import logging
from unittest.mock import patch

from bspstatus.telemetry import Metrics, get_logger, setup_logging, truncate_line


def test_get_logger():
    """测试 logger 名称"""
    assert get_logger("bspstatus.parser").name == "bspstatus.parser"


def test_setup_logging_level():
    """setup_logging 使用指定级别"""
    with patch("bspstatus.telemetry.logging.basicConfig") as mock_config:
        setup_logging("debug")
    assert mock_config.call_args[1]["level"] == "DEBUG"


def test_setup_logging_default_level():
    """默认使用 config.LOG_LEVEL"""
    with patch("bspstatus.telemetry.config.LOG_LEVEL", "WARNING"), patch(
        "bspstatus.telemetry.logging.basicConfig"
    ) as mock_config:
        setup_logging()
    assert mock_config.call_args[1]["level"] == "WARNING"


def test_truncate_line():
    """测试日志截断"""
    assert truncate_line("WM1:o1\n") == "WM1:o1"
    assert truncate_line("W" + "x" * 10, limit=5) == "Wxxxx..."


class TestMetrics:
    """Metrics facade 测试"""

    def test_counter_with_labels(self):
        m = Metrics()
        m.inc("parser.errors", {"reason": "no_monitor"})
        m.inc("parser.errors", {"reason": "no_monitor"})
        m.inc("parser.errors", {"reason": "empty_line"})

        assert m.get_counter("parser.errors", {"reason": "no_monitor"}) == 2
        assert m.get_counter("parser.errors", {"reason": "empty_line"}) == 1
        assert m.get_counter("parser.errors") == 0

    def test_gauge_and_reset(self):
        m = Metrics()
        m.gauge("web.clients", 3)
        m.inc("parser.lines")
        assert m.get_gauge("web.clients") == 3
        m.reset()
        assert m.get_gauge("web.clients") == 0.0
        assert m.get_counter("parser.lines") == 0


def test_parser_logs_unknown_marker(caplog):
    """未知 marker 以 DEBUG 级别记录"""
    from bspstatus.parser import parse_line

    with caplog.at_level(logging.DEBUG, logger="bspstatus.parser"):
        parse_line("WM1:TT")

    assert "unknown marker 'T'" in caplog.text
