import yaml
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "gedcom_io.yml"

DEFAULTS = {
    "debug": False,
    "logging": {
        "level": "INFO",
        "dir": "logs",
        "file": "gedcom_io.log",
        "rotate": False,
        # only a project config file turns file logging on
        "to_file": False,
    },
    "charset": {
        "header_scan_bytes": 32 * 1024,
        "sample_bytes": 1 << 23,
        "sample_lines": 200_000,
        "scan_bytes": 1 << 26,
        "low_confidence": 0.52,
        "high_confidence": 0.98,
        "default": "windows-1252",
    },
    "reader": {
        "decode_errors": "replace",
    },
    "writer": {
        "max_width": 200,
        "line_terminator": "\n",
    },
}


class GPConfig:
    def __init__(self, data, root=None):
        # directory relative paths (log dir) resolve against; None without a config file
        self.root = root
        self.logging = {**DEFAULTS["logging"], **(data.get("logging") or {})}
        self.charset = {**DEFAULTS["charset"], **(data.get("charset") or {})}
        self.reader = {**DEFAULTS["reader"], **(data.get("reader") or {})}
        self.writer = {**DEFAULTS["writer"], **(data.get("writer") or {})}
        self.debug = bool(data.get("debug", DEFAULTS["debug"]))


def load_config(path: Path = CONFIG_PATH) -> 'GPConfig':
    # Installed (non-editable) copies have no config/ directory next to them.
    if not path.exists():
        return GPConfig({})

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return GPConfig(data, root=path.resolve().parent.parent)

_config_cache = None

def get_config() -> 'GPConfig':
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache
