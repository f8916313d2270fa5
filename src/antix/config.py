# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

import json, math
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Optional

from antix.geometry_utils.torus import dtor, rtod

UPDATE_MODES = ("sequential", "two_phase")


@dataclass(frozen=True)
class SimulationParams:
    """Immutable run parameters, built once at startup."""
    puck_count: int = 100
    home_count: int = 1
    home_population: int = 20
    worldsize: float = 1.0
    fov: float = dtor(90.0)
    range: float = 0.1
    pickup_range: float = 0.02
    radius: float = 0.01
    matrixwidth: int = 10
    updates_max: int = 0
    sleep_msec: int = 10
    gui_interval: int = 100
    winsize: int = 600
    show_data: bool = False
    home_radius: float = 0.1
    random_seed: int = 0
    controller: str = "forager"
    detection: str = "range_bearing"
    motion: str = "unicycle"
    update_mode: str = "sequential"
    linear_velocity: float = 0.005
    angular_velocity: float = 0.2
    check_invariants: bool = False

    def __post_init__(self):
        """Validate the parameter set."""
        for name in ("puck_count", "home_count", "home_population", "updates_max", "sleep_msec"):
            if getattr(self, name) < 0:
                raise ValueError(f"Parameter '{name}' must not be negative, got {getattr(self, name)}")
        for name in ("worldsize", "range", "radius", "home_radius", "gui_interval", "winsize"):
            if not getattr(self, name) > 0:
                raise ValueError(f"Parameter '{name}' must be positive, got {getattr(self, name)}")
        if self.pickup_range < 0:
            raise ValueError(f"Parameter 'pickup_range' must not be negative, got {self.pickup_range}")
        if not 0 < self.fov <= 2 * math.pi:
            raise ValueError(f"Parameter 'fov' must be in (0, 360] degrees, got {rtod(self.fov):.2f}")
        if self.matrixwidth < 1:
            raise ValueError(f"Parameter 'matrixwidth' must be >= 1, got {self.matrixwidth}")
        if self.home_population > 0 and self.home_count == 0:
            raise ValueError("Parameter 'home_count' must be >= 1 when robots are requested")
        if self.update_mode not in UPDATE_MODES:
            raise ValueError(f"Parameter 'update_mode' must be one of {UPDATE_MODES}, got '{self.update_mode}'")

    @property
    def population(self) -> int:
        """Total number of robots."""
        return self.home_population

    def with_overrides(self, **changes) -> "SimulationParams":
        """Return a copy with ``changes`` applied (validated again)."""
        return replace(self, **changes)

    def as_dict(self) -> dict:
        """Plain dictionary view, FOV reported in degrees."""
        out = asdict(self)
        out["fov"] = rtod(self.fov)
        return out


_INT_KEYS = {"puck_count", "home_count", "home_population", "matrixwidth", "updates_max",
             "sleep_msec", "gui_interval", "winsize", "random_seed"}
_FLOAT_KEYS = {"worldsize", "fov", "range", "pickup_range", "radius", "home_radius",
               "linear_velocity", "angular_velocity"}
_BOOL_KEYS = {"show_data", "check_invariants"}
_STR_KEYS = {"controller", "detection", "motion", "update_mode"}
KNOWN_KEYS = _INT_KEYS | _FLOAT_KEYS | _BOOL_KEYS | _STR_KEYS


def _coerce(key: str, value: Any) -> Any:
    """Convert a raw config value to the parameter's type."""
    try:
        if key in _INT_KEYS:
            if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
                raise TypeError
            return int(value)
        if key in _FLOAT_KEYS:
            if isinstance(value, bool):
                raise TypeError
            number = float(value)
            if not math.isfinite(number):
                raise TypeError
            return number
        if key in _BOOL_KEYS:
            if isinstance(value, str):
                return value.strip().lower() in ("1", "true", "yes", "on")
            return bool(value)
        return str(value).strip().lower()
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value {value!r} for parameter '{key}'") from None


def build_params(raw: dict) -> SimulationParams:
    """
    Build `SimulationParams` from a flat dictionary of raw values.

    ``fov`` is given in degrees. ``pickup_range`` defaults to a fifth of
    the sensor range and ``matrixwidth`` to one cell per sensor range.
    """
    unknown = set(raw) - KNOWN_KEYS
    if unknown:
        raise ValueError(f"Unknown parameter(s): {', '.join(sorted(unknown))}")
    values = {key: _coerce(key, value) for key, value in raw.items() if value is not None}
    defaults = {f.name: f.default for f in fields(SimulationParams)}
    worldsize = values.get("worldsize", defaults["worldsize"])
    sensor_range = values.get("range", defaults["range"])
    if "fov" in values:
        values["fov"] = dtor(values["fov"])
    if "pickup_range" not in values and sensor_range > 0:
        values["pickup_range"] = sensor_range / 5.0
    if "matrixwidth" not in values and sensor_range > 0 and worldsize > 0:
        values["matrixwidth"] = max(1, int(math.floor(worldsize / sensor_range)))
    return SimulationParams(**values)


class Config:
    """Config."""
    def __init__(self, config_path: str = "", new_data: Optional[dict] = None):
        """Initialize the instance."""
        if config_path:
            self.config_path = config_path
            self.data = self.load_config()
        elif new_data is not None:
            self.config_path = ""
            self.data = new_data
        else:
            raise ValueError("Either config_path or new_data must be provided")
        if not isinstance(self.data, dict):
            raise ValueError("The configuration root must be a JSON object")

    def load_config(self):
        """Load config."""
        with open(self.config_path, 'r') as file:
            try:
                return json.load(file)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Malformed configuration file {self.config_path}: {exc}") from exc

    def _flatten(self) -> dict:
        """Collect parameter values from the nested config sections."""
        env = self.environment
        flat = {k: v for k, v in env.items() if k in KNOWN_KEYS}
        sections = {
            "arena": {"worldsize", "matrixwidth", "random_seed"},
            "sensor": {"fov", "range"},
            "homes": {"home_count", "home_radius"},
            "pucks": {"puck_count"},
            "agents": {"home_population", "radius", "pickup_range", "controller", "detection",
                       "motion", "linear_velocity", "angular_velocity"},
            "gui": {"gui_interval", "winsize", "show_data"},
        }
        aliases = {"homes": {"number": "home_count", "radius": "home_radius"},
                   "pucks": {"number": "puck_count"},
                   "agents": {"number": "home_population"}}
        for section, allowed in sections.items():
            block = env.get(section, {})
            if not isinstance(block, dict):
                raise ValueError(f"The '{section}' field must be an object")
            for key, value in block.items():
                key = aliases.get(section, {}).get(key, key)
                if key in ("_id",):
                    continue
                if key not in allowed:
                    raise ValueError(f"Unknown field '{key}' in '{section}'")
                flat[key] = value
        return flat

    def params(self, overrides: Optional[dict] = None) -> SimulationParams:
        """Return the immutable parameter set, applying ``overrides`` last."""
        raw = self._flatten()
        if overrides:
            raw.update(overrides)
        return build_params(raw)

    @property
    def environment(self) -> dict:
        """Return the environment configuration."""
        return self.data.get('environment', {})

    @property
    def logging(self) -> dict:
        """Return the logging configuration."""
        return self.environment.get('logging', {})

    @property
    def gui(self) -> dict:
        """Return the GUI configuration."""
        return self.environment.get('gui', {})

    @property
    def plugins(self) -> list:
        """Return the plugin modules to import."""
        return list(self.data.get('plugins', [])) + list(self.environment.get('plugins', []))
