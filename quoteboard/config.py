"""Configuration constants"""
import os
from pathlib import Path

VERSION = "0.1.0"

# ANSI Colors & Styling
C_RESET = "\033[0m"
C_RED = "\033[91m"
C_GREEN = "\033[92m"
C_YELLOW = "\033[93m"
C_WHITE = "\033[97m"
C_BLACK = "\033[30m"
C_BOLD = "\033[1m"
C_DIM = "\033[2m"
C_BG_YELLOW = "\033[43m"
C_BG_HEADER = "\033[48;5;238m"

# Persistence
DB_PATH = Path(os.getenv("QUOTEBOARD_DB", str(Path.home() / ".stocks.json")))

# Quote provider
QUOTE_URL = os.getenv("QUOTEBOARD_QUOTE_URL", "http://api.money.126.net/data/feed/")
QUOTE_PREFIX = "_ntes_quote_callback("
QUOTE_SUFFIX = ");"
HTTP_TIMEOUT = float(os.getenv("QUOTEBOARD_HTTP_TIMEOUT", "10"))
SERVER_ERROR = "Server Returns Errors"

# Timing
TICK_INTERVAL = 1.0        # seconds per tick
REFRESH_EVERY_TICKS = 60   # periodic refresh cadence

# Logging
LOG_FILE = os.getenv("QUOTEBOARD_LOG_FILE", str(Path.home() / ".quoteboard.log"))
LOG_LEVEL = os.getenv("QUOTEBOARD_LOG_LEVEL", "INFO").upper()

# Layout
LIST_TOP_ROW = 2           # title bar + list border
LIST_WIDTH_PERCENT = 30

# Key help per mode
HELP_NORMAL = "EXIT[Q] | NEW[N] | DEL[D] | REFRESH[R] | UP[U] | DOWN[J]"
HELP_ADDING = "ENTER[Enter] | CANCEL[ESC] | PREFIX 0 FOR SHANGHAI, 1 FOR SHENZHEN"
