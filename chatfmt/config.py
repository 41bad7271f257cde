"""Configuration — YAML file → Formatter.

    colors:
      simple: true
      escape_char: "§"
      alt_char: "&"
      codecs: [gradient, hex, legacy]
    targets:
      sound_namespace: minecraft
      apply_events: true
      handlers: [action_bar, sound, console, player]
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from chatfmt.codes import ALT_COLOR_CHAR, COLOR_CHAR, EscapeScheme
from chatfmt.colors import GradientColorCodec, HexColorCodec, LegacyColorCodec
from chatfmt.pipeline import Formatter
from chatfmt.targets import (
    DEFAULT_SOUND_NAMESPACE,
    HANDLERS,
    ConsoleTarget,
    PlayerTarget,
    SoundTarget,
)

log = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = BASE_DIR / "config" / "chatfmt.yaml"

DEFAULTS: dict[str, Any] = {
    "colors": {
        "simple": True,
        "escape_char": COLOR_CHAR,
        "alt_char": ALT_COLOR_CHAR,
        "codecs": ["gradient", "hex", "legacy"],
    },
    "targets": {
        "sound_namespace": DEFAULT_SOUND_NAMESPACE,
        "apply_events": True,
        "handlers": ["action_bar", "sound", "console", "player"],
    },
}

CODECS = {
    GradientColorCodec.name: GradientColorCodec,
    HexColorCodec.name: HexColorCodec,
    LegacyColorCodec.name: LegacyColorCodec,
}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load a YAML config over the defaults. A missing default file yields the defaults."""
    if path is None:
        path = DEFAULT_CONFIG_PATH
        if not path.exists():
            log.debug("No config at %s, using defaults", path)
            return copy.deepcopy(DEFAULTS)
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping: {path}")
    log.info("Loaded chat format config: %s", path)
    return _merge(DEFAULTS, data)


def build_formatter(config: dict[str, Any] | None = None) -> Formatter:
    """Create a Formatter with the codecs and handlers named in ``config``, in order."""
    cfg = _merge(DEFAULTS, config or {})
    colors = cfg["colors"]
    targets = cfg["targets"]

    alt_char = colors.get("alt_char") or None
    scheme = EscapeScheme(colors["escape_char"], alt_char)
    fmt = Formatter(simple=bool(colors["simple"]), apply_events=bool(targets["apply_events"]))

    for name in colors["codecs"]:
        if name not in CODECS:
            raise ValueError(f"Unknown color codec in config: {name!r}")
        if name == LegacyColorCodec.name:
            if alt_char is None:
                raise ValueError("The legacy codec needs colors.alt_char")
            codec = LegacyColorCodec(alt_char, scheme)
        else:
            codec = CODECS[name](scheme)
        fmt.register_color_codec(name, codec)

    for name in targets["handlers"]:
        if name not in HANDLERS:
            raise ValueError(f"Unknown target handler in config: {name!r}")
        if name == SoundTarget.name:
            handler = SoundTarget(targets["sound_namespace"])
        elif name in (PlayerTarget.name, ConsoleTarget.name):
            handler = HANDLERS[name](fmt.apply_events)
        else:
            handler = HANDLERS[name]()
        fmt.register_target_handler(handler)

    log.info("Formatter ready: codecs=%s handlers=%s", fmt.colors.names, fmt.targets.names)
    return fmt
