"""bspstatus configuration

Settings are grouped by concern:
- bspc: the status-reporting command
- logging: level and message truncation
- web: host/port of the live view
- console: glyphs used by the status bar renderer
"""

import os

# === bspc 配置 ===
BSPC_EXECUTABLE = os.environ.get("BSPSTATUS_BSPC", "bspc")  # bspc executable
BSPC_SUBSCRIBE_ARGS = ("subscribe", "report")  # one report line per state change
BSPWM_SOCKET = os.environ.get("BSPWM_SOCKET") or None  # None => bspc default socket
MAX_CONSECUTIVE_READ_ERRORS = 5  # snapshots() gives up after this many failed reads in a row

# === 协议配置 ===
FIELD_SEP = ":"  # section delimiter in a report line

# === 日志配置 ===
LOG_LEVEL = os.environ.get("BSPSTATUS_LOG_LEVEL", "INFO")  # 日志级别
LOG_MAX_LINE_LEN = 120  # report line truncation in log messages

# === Web 配置 ===
WEB_HOST = os.environ.get("BSPSTATUS_HOST", "127.0.0.1")
WEB_PORT = int(os.environ.get("BSPSTATUS_PORT", "8766"))

# === Console 配置 ===
GLYPH_FOCUSED = "●"
GLYPH_OCCUPIED = "◉"
GLYPH_FREE = "○"
GLYPH_URGENT = "!"
