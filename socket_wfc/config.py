from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from .grid import DEFAULT_HEIGHT, DEFAULT_WIDTH, PROPAGATION_MODES

DEFAULT_FRAMERATE = None
DEFAULT_TINT = False
DEFAULT_MAX_RESTARTS = 10

Tint = Union[bool, Tuple[int, int, int]]


@dataclass
class ModelSettings:
    """
    Settings for one solve. ``framerate`` and ``tint`` are only read by the
    renderer; the solver itself uses the rest.
    """
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    framerate: Optional[float] = DEFAULT_FRAMERATE
    tint: Tint = DEFAULT_TINT
    seed: Optional[int] = None
    propagation: str = "sweep"
    restart_on_contradiction: bool = False
    max_restarts: int = DEFAULT_MAX_RESTARTS

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if isinstance(self.tint, tuple):
            data["tint"] = list(self.tint)
        return data


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return value


def _parse_tint(value: Any) -> Tint:
    if isinstance(value, bool):
        return value
    if isinstance(value, (list, tuple)) and len(value) == 3 and all(
            isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255 for c in value):
        return tuple(value)
    raise ValueError(f"tint must be true, false or an [r, g, b] triple of 0-255, got {value!r}")


def resolve_settings(options: Optional[Dict[str, Any]] = None) -> ModelSettings:
    """
    Fill in defaults for missing or None options and validate the result.

    Args:
        options: Partial settings, e.g. loaded from YAML or built from CLI flags

    Returns:
        ModelSettings: Complete, validated settings
    """
    options = {k: v for k, v in (options or {}).items() if v is not None}
    known = {f.name for f in fields(ModelSettings)}
    unknown = sorted(set(options) - known)
    if unknown:
        raise ValueError(f"Unknown option(s): {', '.join(unknown)}")

    settings = ModelSettings(**options)
    _positive_int("width", settings.width)
    _positive_int("height", settings.height)
    if settings.framerate is not None:
        if isinstance(settings.framerate, bool) or not isinstance(settings.framerate, (int, float)) \
                or settings.framerate <= 0:
            raise ValueError(f"framerate must be a positive number, got {settings.framerate!r}")
    settings.tint = _parse_tint(settings.tint)
    if settings.seed is not None and (isinstance(settings.seed, bool) or not isinstance(settings.seed, int)):
        raise ValueError(f"seed must be an integer, got {settings.seed!r}")
    if settings.propagation not in PROPAGATION_MODES:
        raise ValueError(f"propagation must be one of {PROPAGATION_MODES}, got {settings.propagation!r}")
    if isinstance(settings.max_restarts, bool) or not isinstance(settings.max_restarts, int) \
            or settings.max_restarts < 0:
        raise ValueError(f"max_restarts must be a non-negative integer, got {settings.max_restarts!r}")
    settings.restart_on_contradiction = bool(settings.restart_on_contradiction)
    return settings


def load_settings(path: str, overrides: Optional[Dict[str, Any]] = None) -> ModelSettings:
    """Load settings from a YAML file, with ``overrides`` taking precedence"""
    with open(path, "r") as f:
        try:
            options = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Settings file {path}: {e}") from e
    if not isinstance(options, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")
    options.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return resolve_settings(options)


def save_settings(settings: ModelSettings, path: str) -> None:
    with open(path, "w") as f:
        yaml.dump(settings.to_dict(), f, default_flow_style=False)
