# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

"""
Runtime registry for robot strategies.

A robot is put together from three strategies looked up by name: its
controller, the world's detection model and the world's motion model.
Built-in strategies register themselves when `antix.models` is imported;
third-party modules do the same with the `register_*` functions and are
pulled in through the config's ``plugins`` lists.
"""

import importlib
from typing import Any, Callable, Dict, Iterable

from antix.logging_utils import get_logger
from antix.plugin_base import Controller, DetectionModel, MotionModel

logger = get_logger("plugin_registry")


class _Registry:
    """Case-insensitive name -> factory table for one kind of strategy."""

    def __init__(self, kind: str):
        self.kind = kind
        self.factories: Dict[str, Callable[..., Any]] = {}

    @staticmethod
    def key(name: str) -> str:
        return (name or "").strip().lower()

    def add(self, name: str, factory: Callable[..., Any]) -> None:
        key = self.key(name)
        if key in self.factories and self.factories[key] is not factory:
            logger.info("Replacing %s '%s'", self.kind, key)
        self.factories[key] = factory

    def build(self, name: str, *args: Any) -> Any:
        factory = self.factories.get(self.key(name))
        if factory is None:
            raise ValueError(f"Unknown {self.kind} '{name}'; registered: {sorted(self.factories)}")
        return factory(*args)


_controllers = _Registry("controller")
_detection_models = _Registry("detection model")
_motion_models = _Registry("motion model")


def register_controller(name: str, factory: Callable[[Any, Any], Controller]) -> None:
    """
    Make a controller available under ``name``.

    ``factory(robot, params)`` is called once per robot and must return an
    object with a ``step(robot, tick)`` method. ``name`` is what the config
    puts in ``agents.controller``.
    """
    _controllers.add(name, factory)


def get_controller(name: str, robot: Any, params: Any) -> Controller:
    """Build the controller for ``robot``; unknown names raise ValueError."""
    return _controllers.build(name, robot, params)


def available_controllers() -> Dict[str, Callable[[Any, Any], Controller]]:
    return dict(_controllers.factories)


def register_detection_model(name: str, factory: Callable[[Any], DetectionModel]) -> None:
    """``factory(params)`` returns the world's sensor."""
    _detection_models.add(name, factory)


def get_detection_model(name: str, params: Any) -> DetectionModel:
    return _detection_models.build(name, params)


def available_detection_models() -> Dict[str, Callable[[Any], DetectionModel]]:
    return dict(_detection_models.factories)


def register_motion_model(name: str, factory: Callable[[Any], MotionModel]) -> None:
    """``factory(params)`` returns the world's kinematics."""
    _motion_models.add(name, factory)


def get_motion_model(name: str, params: Any) -> MotionModel:
    return _motion_models.build(name, params)


def available_motion_models() -> Dict[str, Callable[[Any], MotionModel]]:
    return dict(_motion_models.factories)


def load_plugins(modules: Iterable[str]) -> None:
    """Import each module for its registrations; failures are logged and skipped."""
    for module in modules:
        try:
            importlib.import_module(module)
        except Exception as exc:
            logger.warning("Could not load plugin module '%s': %s", module, exc)
        else:
            logger.info("Loaded plugin module '%s'", module)


def load_plugins_from_config(config: Any) -> None:
    """
    Import the modules named in the config's ``plugins`` lists.

    Both the top-level list and ``environment.plugins`` are read, in that
    order::

        {"plugins": ["pkg.controller"], "environment": {"plugins": ["other.module"]}}
    """
    data = getattr(config, "data", None)
    if not isinstance(data, dict):
        return
    environment = data.get("environment") or {}
    load_plugins(list(data.get("plugins", [])) + list(environment.get("plugins", [])))
