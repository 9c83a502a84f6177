import json
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "gridsift")
HISTORY_PATH = os.path.join(CONFIG_DIR, "history.log")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")

# default settings
CASE_SENSITIVE_DEFAULT = False
FUZZY_DEFAULT = False
FUZZY_THRESHOLD_DEFAULT = 0.6
SEARCH_CHUNK_PERCENT_DEFAULT = 1.0
ROW_HEIGHT_DEFAULT = 35
OVERSCAN_DEFAULT = 10
CLIPBOARD_INTERFACE_COMMAND_DEFAULT = ["wl-copy"]
CLIPBOARD_PASTE_COMMAND_DEFAULT = ["wl-paste", "--no-newline"]


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)
    if not os.path.exists(HISTORY_PATH):
        try:
            with open(HISTORY_PATH, "w", encoding="utf-8") as f:
                f.write("")
        except OSError:
            pass


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_argv(value) -> bool:
    return (
        isinstance(value, list)
        and bool(value)
        and all(isinstance(item, str) for item in value)
    )


def default_config():
    return {
        "CASE_SENSITIVE": CASE_SENSITIVE_DEFAULT,
        "FUZZY": FUZZY_DEFAULT,
        "FUZZY_THRESHOLD": FUZZY_THRESHOLD_DEFAULT,
        "SEARCH_CHUNK_PERCENT": SEARCH_CHUNK_PERCENT_DEFAULT,
        "ROW_HEIGHT": ROW_HEIGHT_DEFAULT,
        "OVERSCAN": OVERSCAN_DEFAULT,
        "CLIPBOARD_INTERFACE_COMMAND": list(CLIPBOARD_INTERFACE_COMMAND_DEFAULT),
        "CLIPBOARD_PASTE_COMMAND": list(CLIPBOARD_PASTE_COMMAND_DEFAULT),
    }


def load_config():
    cfg = default_config()

    if not os.path.exists(CONFIG_JSON):
        return cfg
    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return cfg
    if not isinstance(data, dict):
        return cfg

    search = data.get("search")
    if isinstance(search, dict):
        if isinstance(search.get("case_sensitive"), bool):
            cfg["CASE_SENSITIVE"] = search["case_sensitive"]
        if isinstance(search.get("fuzzy"), bool):
            cfg["FUZZY"] = search["fuzzy"]
        threshold = search.get("fuzzy_threshold")
        if _is_number(threshold):
            cfg["FUZZY_THRESHOLD"] = max(0.3, min(0.95, float(threshold)))
        chunk = search.get("chunk_percent")
        if _is_number(chunk):
            cfg["SEARCH_CHUNK_PERCENT"] = max(0.5, min(5.0, float(chunk)))

    viewport = data.get("viewport")
    if isinstance(viewport, dict):
        row_height = viewport.get("row_height")
        if _is_number(row_height) and row_height > 0:
            cfg["ROW_HEIGHT"] = row_height
        overscan = viewport.get("overscan")
        if isinstance(overscan, int) and not isinstance(overscan, bool) and overscan >= 0:
            cfg["OVERSCAN"] = overscan

    clip_cmd = data.get("clipboard_interface_command")
    if _is_argv(clip_cmd):
        cfg["CLIPBOARD_INTERFACE_COMMAND"] = clip_cmd
    paste_cmd = data.get("clipboard_paste_command")
    if _is_argv(paste_cmd):
        cfg["CLIPBOARD_PASTE_COMMAND"] = paste_cmd

    return cfg
