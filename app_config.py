"""
Application configuration settings
Do not modify these values once your application has been distributed to users.
This file centralises brand, paths, playback constants, and runtime defaults.
"""

from __future__ import annotations
import os
import platform
from pathlib import Path

DEV_MODE = False
DEV_STARTUP_VIZ = ""  # absolute path to a payload file opened on startup ("" disables)

# ───────────────────────────────────────────────────────────────────────────────
# Identity
# ───────────────────────────────────────────────────────────────────────────────
APP_NAME = "Vizr"
APP_VERSION = "0.1.0"
COMPANY_NAME = "Digi Monsters"
APP_PNG = os.path.join(os.path.dirname(__file__), "vizr", "resources", "images", "vizr.png")

# Reverse-DNS App ID (used in About/QSettings/diagnostics)
APP_ID = "uk.digimonsters.vizr"

# Organization identifiers (for QSettings, folders, About box)
ORG_NAME = "Digi Monsters"       # human readable
ORG_DIRNAME = "DigiMonsters"     # filesystem safe (no spaces)
ORG_DOMAIN = "digimonsters.uk"

REPO_URL = "https://github.com/thedigimonsters/dm_vizr"
APP_DESCRIPTION = (
    "Vizr turns loosely structured visualization descriptions into looping "
    "canvas animations, falling back to a demo loop when nothing usable arrives."
)

BUILD_COMMIT = os.getenv("VIZR_BUILD_COMMIT", "")[:7]
BUILD_CHANNEL = os.getenv("VIZR_BUILD_CHANNEL", "dev")  # dev/beta/stable


def version_string() -> str:
    """Human-friendly version string for About dialogs and logs."""
    meta = f"+{BUILD_COMMIT}" if BUILD_COMMIT else ""
    chan = f" ({BUILD_CHANNEL})" if BUILD_CHANNEL and BUILD_CHANNEL != "stable" else ""
    return f"{APP_VERSION}{meta}{chan}"


# ───────────────────────────────────────────────────────────────────────────────
# Playback / interpretation constants
# ───────────────────────────────────────────────────────────────────────────────
DEFAULT_DURATION_MS = 5000        # scene loop period when absent/invalid
DEFAULT_ANIMATION_SPAN_MS = 1000  # animation `end` defaults to start + span
MAX_FRAME_DELTA_MS = 250.0        # clamp on per-tick delta (window restore, debugger pauses)
DEMO_PERIOD_MS = 3000             # demo disc crosses the canvas once per period
MIN_SURFACE_SIZE = 100            # px, per axis
MAX_NORMALIZE_DEPTH = 8           # nested .visualization unwrapping limit


def _env_int(name: str, fallback: int, min_value: int = 1, max_value: int = 1000) -> int:
    raw = str(os.getenv(name, "")).strip()
    if not raw:
        return fallback
    try:
        value = int(raw)
    except ValueError:
        return fallback
    return max(min_value, min(max_value, value))


TICK_INTERVAL_MS = _env_int("VIZR_TICK_INTERVAL_MS", 16)  # ~60 Hz host refresh

PAYLOAD_FILE_FILTER = "Visualization payloads (*.json *.md *.txt);;All files (*)"


# ───────────────────────────────────────────────────────────────────────────────
# User data locations (settings, logs)
# ───────────────────────────────────────────────────────────────────────────────
def _appdata_base() -> Path:
    system = platform.system()
    if system == "Windows":
        base = os.getenv("APPDATA") or (Path.home() / "AppData" / "Roaming")
    elif system == "Darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
    return Path(base) / ORG_DIRNAME / APP_NAME


APPDATA_DIR = _appdata_base()
LOG_DIR = APPDATA_DIR / "logs"


def ensure_app_dirs() -> None:
    """Create required folders if they don't exist."""
    for p in (APPDATA_DIR, LOG_DIR):
        p.mkdir(parents=True, exist_ok=True)


# ───────────────────────────────────────────────────────────────────────────────
# QSettings bootstrap (call once during app init)
# ───────────────────────────────────────────────────────────────────────────────
def apply_qsettings_org() -> None:
    """
    Apply org/app metadata for QSettings. Call early in startup,
    before constructing your first QSettings instance.
    """
    try:
        from PySide6.QtCore import QCoreApplication
        QCoreApplication.setOrganizationName(ORG_NAME)
        QCoreApplication.setOrganizationDomain(ORG_DOMAIN)
        QCoreApplication.setApplicationName(APP_NAME)
    except Exception:
        # Safe to import this module in non-Qt contexts (e.g., CLI tools)
        pass


# ───────────────────────────────────────────────────────────────────────────────
# CLI hints (for the argparse setup in main.py)
# ───────────────────────────────────────────────────────────────────────────────
CLI_NAME = "vizr"
CLI_EXAMPLES = (
    'vizr --open answer.json\n'
    'vizr --sample --dark\n'
    'vizr --open reply.md --snapshot frame.png --at 1500 --size 640x400\n'
)

# ───────────────────────────────────────────────────────────────────────────────
# Defaults / UI hints (read by settings wrapper; safe to change before shipping)
# ───────────────────────────────────────────────────────────────────────────────
DEFAULTS = {
    "ui": {
        "dark_mode": False,
        "show_inspector": True,
    },
    "paths": {
        "last_open_dir": "",
    },
}

# Built-in sample, handy for checking the renderer without an upstream answer.
SAMPLE_VISUALIZATION = {
    "id": "vis_sample",
    "duration": 4000,
    "layers": [
        {
            "type": "rect",
            "props": {"x": 100, "y": 100, "width": 100, "height": 50, "fill": "#3b82f6"},
            "animations": [
                {"property": "x", "start": 0, "end": 2000, "from": 100, "to": 300},
            ],
        },
        {
            "type": "circle",
            "props": {"x": 200, "y": 200, "radius": 30, "fill": "#ef4444"},
        },
        {
            "type": "text",
            "props": {"x": 200, "y": 250, "content": "Test Visualization", "fontSize": 18},
        },
    ],
}


# ───────────────────────────────────────────────────────────────────────────────
# Convenience banner for logs / about dialog
# ───────────────────────────────────────────────────────────────────────────────
def banner() -> str:
    return (
        f"{APP_NAME} {version_string()}  •  {APP_ID}\n"
        f"Vendor: {COMPANY_NAME}  •  Repo: {REPO_URL}\n"
        f"Data: {APPDATA_DIR}"
    )


if __name__ == "__main__":
    ensure_app_dirs()
    print(banner())
