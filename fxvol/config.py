"""
Global configuration for the FX vol surface dashboard.

Keeps all magic numbers in one place. Gateway settings can be overridden
through environment variables, everything else via CLI args in main.py
or by editing this file directly.
"""

import os
from pathlib import Path


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# ── paths ────────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = PROJECT_ROOT / "output"


# ── gateway ──────────────────────────────────────────────────────────────
DEFAULT_API_URL = (
    "https://bloomberg-gateway.internal.delightfulground-653e61be"
    ".eastus.azurecontainerapps.io/api"
)
API_BASE_URL = os.environ.get("FXVOL_API_URL", DEFAULT_API_URL)

# dev mode always serves synthetic surfaces
DEV_MODE = _env_flag("FXVOL_DEV_MODE", False)

# when False, a failed gateway fetch raises instead of degrading to mock data
FALLBACK_TO_MOCK = _env_flag("FXVOL_FALLBACK_TO_MOCK", True)

LIVE_GATEWAY_MARKER = "bloomberg"   # base URLs without this are not a live gateway
HEALTH_PATH = "/health"
REFERENCE_PATH = "/bloomberg/reference"
REFERENCE_FIELDS = ["PX_LAST", "PX_BID", "PX_ASK"]
BATCH_SIZE = 50                     # gateway limit on securities per request
MAX_WORKERS = 8                     # concurrent batch requests

HEALTH_TIMEOUT = 5.0                # seconds
REQUEST_TIMEOUT = 30.0              # seconds, reference-data requests
HEALTH_POLL_INTERVAL = 30.0         # seconds between connection checks
MOCK_DELAY = 0.5                    # simulated latency for the mock path


# ── market conventions ───────────────────────────────────────────────────
CURRENCY_PAIRS = (
    "EURUSD", "GBPUSD", "USDJPY", "USDCHF", "AUDUSD", "USDCAD", "NZDUSD",
    "EURGBP", "EURJPY", "EURCHF", "EURAUD", "EURCAD", "EURNZD",
    "GBPJPY", "GBPCHF", "GBPAUD", "GBPCAD", "GBPNZD",
    "AUDJPY", "CADJPY", "NZDJPY", "CHFJPY",
    "AUDCAD", "AUDCHF", "AUDNZD", "CADCHF", "NZDCAD", "NZDCHF",
)
DEFAULT_PAIR = "EURUSD"

DATA_MODES = ("Live", "Latest EOD", "Historical")
DEFAULT_MODE = "Live"

TENOR_LABELS = ["ON", "1W", "2W", "3W", "1M", "2M", "3M", "4M", "6M", "9M", "1Y", "18M", "2Y"]

# tenor label -> ticker code used in the ATM identifier
TENOR_CODES = {tenor: f"V{tenor}" for tenor in TENOR_LABELS}

# quoted deltas for risk reversals and butterflies
QUOTE_DELTAS = [5, 10, 15, 20, 25, 30, 40, 50]

# surface x-axis: call deltas, ATM (0), put deltas
DELTA_VALUES = [50, 40, 30, 25, 20, 15, 10, 5, 0, -5, -10, -15, -20, -25, -30, -40, -50]


# ── synthetic surface ────────────────────────────────────────────────────
MOCK_BASE_VOL_MIN = 8.0             # base vol drawn from [8, 12)
MOCK_BASE_VOL_RANGE = 4.0
MOCK_SMILE_COEF = 0.02              # vol pts per unit |delta|
MOCK_TERM_COEF = 0.1                # vol pts per tenor step
MOCK_NOISE_WIDTH = 0.5              # uniform noise in [-0.25, 0.25)
MOCK_VOL_FLOOR = 5.0
MOCK_VOL_CAP = 20.0


# ── dashboard ────────────────────────────────────────────────────────────
APP_TITLE = "Bloomberg Volatility Surface"
APP_SUBTITLE = "Real-time FX Option Volatilities"
SURFACE_TAB = "volatility-surface"
TABS = [
    ("volatility-surface", "Volatility Surface"),
    ("historical-analysis", "Historical Analysis"),
    ("volatility-analysis", "Volatility Analysis"),
    ("yield-curves", "Yield Curves"),
    ("fx-forwards", "FX Forwards"),
    ("option-pricing", "Option Pricing"),
    ("portfolio", "Portfolio"),
]
# header label per data mode; modes share one fetch path
MODE_LABELS = {
    "Live": "Real-time Bloomberg Data",
    "Latest EOD": "Latest EOD Bloomberg Data",
    "Historical": "Historical Bloomberg Data",
}
HOST = "127.0.0.1"
PORT = 8050


# ── visualization ────────────────────────────────────────────────────────
DARK_BG = "#0f0f0f"
PANEL_BG = "#1a1a1a"
BORDER_COLOR = "#2d2d2d"
MUTED_TEXT = "#a0a0a0"
ACCENT = "#7A9E65"
CONNECTED_COLOR = "#7A9E65"
DISCONNECTED_COLOR = "#d9534f"

SURFACE_COLORSCALE = [
    [0, "#1a1a1a"],      # carbon black (low vol)
    [0.25, "#2d4a3a"],   # dark forest green
    [0.5, "#7A9E65"],    # theme green
    [0.75, "#a8c98a"],   # light green
    [1, "#d4e7c5"],      # very light green (high vol)
]

PLOTLY_CAMERA = dict(eye=dict(x=1.5, y=1.5, z=1.5), center=dict(x=0, y=0, z=0))

DPI = 200                       # matplotlib export resolution
FIG_WIDTH_3D = 14
FIG_HEIGHT_3D = 9
COLORMAP = "Greens"
ELEV = 25
AZIM = -55

# smile chart tenors and line colors
SMILE_TENORS = ["1W", "1M", "3M", "1Y", "2Y"]
SMILE_COLORS = ["#d4e7c5", "#a8c98a", "#7A9E65", "#4d96ff", "#ffd93d"]
