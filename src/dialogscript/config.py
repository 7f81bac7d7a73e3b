"""Configuration loading and defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .exporters import EXPORT_FORMATS
from .pdf_export import PAGE_SIZES

_DEFAULT_OUTPUT_DIR = Path.home() / "Documents" / "Dialogscript"
_DEFAULT_LIBRARY_PATH = Path.home() / ".local" / "share" / "dialogscript" / "sessions.json"
_DEFAULT_CONFIG_DIR = Path.home() / ".config" / "dialogscript"
_DEFAULT_CONFIG_PATH = _DEFAULT_CONFIG_DIR / "config.yaml"


@dataclass
class Config:
    output_dir: Path = field(default_factory=lambda: _DEFAULT_OUTPUT_DIR)
    formats: list[str] = field(default_factory=lambda: ["txt"])
    library_path: Path = field(default_factory=lambda: _DEFAULT_LIBRARY_PATH)
    page_size: str = "letter"


def load_config(config_path: Path | None = None) -> Config:
    """Load config from a YAML file.

    An explicitly given path must exist. Without one, the default location
    is used when present and built-in defaults otherwise.
    """
    path = Path(config_path or _DEFAULT_CONFIG_PATH).expanduser()

    if not path.exists():
        if config_path is not None:
            raise FileNotFoundError(
                f"Config file not found: {path}\n"
                f"Create one at {_DEFAULT_CONFIG_PATH} or omit --config."
            )
        return Config()

    raw = yaml.safe_load(path.read_text())
    if not raw or not isinstance(raw, dict):
        raise ValueError(f"Invalid config file: {path}")

    kwargs: dict = {}
    if "output_dir" in raw:
        kwargs["output_dir"] = Path(raw["output_dir"]).expanduser()
    if "library_path" in raw:
        kwargs["library_path"] = Path(raw["library_path"]).expanduser()
    if "formats" in raw:
        formats = raw["formats"]
        if isinstance(formats, str):
            formats = [formats]
        formats = [str(f).lower() for f in formats or []]
        unknown = [f for f in formats if f not in EXPORT_FORMATS]
        if unknown or not formats:
            raise ValueError(
                f"'formats' must list one or more of {', '.join(EXPORT_FORMATS)}"
                + (f" (unknown: {', '.join(unknown)})" if unknown else "")
            )
        kwargs["formats"] = formats
    if "page_size" in raw:
        page_size = str(raw["page_size"]).lower()
        if page_size not in PAGE_SIZES:
            raise ValueError(f"'page_size' must be one of {', '.join(PAGE_SIZES)}")
        kwargs["page_size"] = page_size

    return Config(**kwargs)
