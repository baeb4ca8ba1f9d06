"""Load and save the configuration document as YAML."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterable

import numpy as np
import yaml

from ..core.transform import Affine3, is_affine
from .backends import BACKEND_ALIASES, Backend, default_backend, detect_backends
from .durations import format_duration, parse_duration
from .errors import (
    ConfigIOError,
    InvalidTransformError,
    MalformedConfigError,
    UnknownVariantError,
)
from .schema import (
    DISPLAY_MODES,
    POSITION_MODES,
    U32_MAX,
    Absolute,
    Button,
    Config,
    Direct,
    DisplayMode,
    Eye,
    Flat,
    HeadLocked,
    OverlayConfig,
    PositionMode,
    ProjectionMode,
    Stereo,
    Sticky,
)

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "index_camera_passthrough.yaml"

TOP_LEVEL_KEYS = {
    "backend", "camera_device", "overlay", "display", "display_mode",
    "toggle_button", "open_delay", "z_order", "debug",
}


def default_search_paths() -> list[Path]:
    """XDG config directories, most specific first."""
    config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    config_dirs = os.environ.get("XDG_CONFIG_DIRS") or "/etc/xdg"
    return [Path(config_home), *(Path(d) for d in config_dirs.split(os.pathsep) if d)]


def _join(key: str, child: str) -> str:
    return f"{key}.{child}" if key else child


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigLoader:
    """Loads the passthrough configuration from a YAML document.

    YAML format:
    ```yaml
    backend: openvr              # openvr | steamvr | openxr
    camera_device: ""            # empty for autodetect
    overlay:
      position:
        mode: sticky             # hmd | sticky | absolute
        distance: 1.0
    display:
      mode: stereo               # direct | stereo | flat
      projection_mode: from_eye
    toggle_button: menu
    open_delay: 500ms
    z_order: 4294967295
    debug: false
    ```

    An ``absolute`` position takes a row-major 4x4 ``transform`` instead of
    ``distance``. Every field is optional apart from ``backend`` when no
    default backend is available. A key with an empty (null) value counts as
    absent.
    """

    def __init__(
        self,
        search_paths: list[Path] | None = None,
        backends: Iterable[Backend] | None = None,
        strict: bool = False,
    ) -> None:
        """Initialize loader.

        Args:
            search_paths: Directories to search for the configuration file.
                Defaults to the XDG config directories.
            backends: Backends available to this process. Defaults to the
                ones whose bindings are installed.
            strict: Reject unknown keys instead of ignoring them
        """
        self.search_paths = default_search_paths() if search_paths is None else search_paths
        self.backends = detect_backends() if backends is None else tuple(backends)
        self.strict = strict

    def find(self) -> Path | None:
        """Find the configuration file in the search paths."""
        for search_path in self.search_paths:
            path = Path(search_path) / CONFIG_FILE_NAME
            if path.exists():
                return path
        return None

    def load(self, path: str | Path | None = None) -> Config:
        """Load the configuration.

        Args:
            path: Explicit file to read. When omitted the search paths are
                used, and the defaults are returned if no file is found.

        Returns:
            The validated configuration

        Raises:
            ConfigIOError: If the file cannot be read
            SchemaError: If the document is invalid
        """
        if path is None:
            path = self.find()
            if path is None:
                logger.info("No %s found in %s, using defaults", CONFIG_FILE_NAME,
                            [str(p) for p in self.search_paths])
                return self.default()

        path = Path(path)
        logger.info("Loading configuration from %s", path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigIOError(f"cannot read {path}: {e}") from e
        return self.load_string(text)

    def load_string(self, yaml_string: str) -> Config:
        """Load the configuration from a YAML string."""
        try:
            data = yaml.safe_load(yaml_string)
        except yaml.YAMLError as e:
            raise MalformedConfigError(f"invalid YAML: {e}") from e
        if data is None:
            data = {}
        return self.parse(data)

    def default(self) -> Config:
        """Configuration used when no document exists."""
        return self.parse({})

    def parse(self, data: Any) -> Config:
        """Build a Config from already decoded document data."""
        data = self._mapping(data, "", TOP_LEVEL_KEYS)

        if "display" in data and "display_mode" in data:
            raise MalformedConfigError("both 'display' and 'display_mode' given")
        display = data.get("display", data.get("display_mode"))
        display_key = "display" if "display" in data else "display_mode"

        config = Config(backend=self._parse_backend(data.get("backend")))

        if data.get("camera_device") is not None:
            if not isinstance(data["camera_device"], str):
                raise MalformedConfigError("expected a string", "camera_device")
            config.camera_device = data["camera_device"]
        if data.get("overlay") is not None:
            config.overlay = self._parse_overlay(data["overlay"], "overlay")
        if display is not None:
            config.display_mode = self._parse_display(display, display_key)
        if data.get("toggle_button") is not None:
            config.toggle_button = self._parse_enum(data["toggle_button"], Button, "toggle_button")
        if data.get("open_delay") is not None:
            config.open_delay = self._parse_duration(data["open_delay"], "open_delay")
        if data.get("z_order") is not None:
            config.z_order = self._parse_z_order(data["z_order"], "z_order")
        if data.get("debug") is not None:
            if not isinstance(data["debug"], bool):
                raise MalformedConfigError("expected true or false", "debug")
            config.debug = data["debug"]

        return config

    def _mapping(self, data: Any, key: str, allowed: set[str]) -> dict[str, Any]:
        """Check that data is a mapping and handle keys outside ``allowed``."""
        if not isinstance(data, dict):
            raise MalformedConfigError(
                f"expected a mapping, got {type(data).__name__}", key or None
            )
        for name in data:
            if name in allowed:
                continue
            if self.strict:
                raise MalformedConfigError("unknown key", _join(key, str(name)))
            logger.warning("Ignoring unknown configuration key %r", _join(key, str(name)))
        return data

    def _parse_backend(self, value: Any) -> Backend:
        if value is None:
            backend = default_backend(self.backends)
            if backend is None:
                raise MalformedConfigError("missing field and no backend is available", "backend")
            return backend

        if not isinstance(value, str):
            raise MalformedConfigError("expected a string", "backend")
        backend = BACKEND_ALIASES.get(value)
        if backend is None or backend not in self.backends:
            expected = [name for name, b in BACKEND_ALIASES.items() if b in self.backends]
            raise UnknownVariantError(value, expected, "backend")
        return backend

    def _parse_overlay(self, data: Any, key: str) -> OverlayConfig:
        data = self._mapping(data, key, {"position"})
        if data.get("position") is None:
            return OverlayConfig()
        return OverlayConfig(position=self._parse_position(data["position"], _join(key, "position")))

    def _tag(self, data: dict[str, Any], variants: dict[str, type], key: str) -> type:
        """Resolve the ``mode`` tag of a tagged union."""
        if "mode" not in data:
            raise MalformedConfigError("missing field 'mode'", key)
        mode = data["mode"]
        if not isinstance(mode, str):
            raise MalformedConfigError("expected a string", _join(key, "mode"))
        if mode not in variants:
            raise UnknownVariantError(mode, list(variants), _join(key, "mode"))
        return variants[mode]

    def _parse_position(self, data: Any, key: str) -> PositionMode:
        data = self._mapping(data, key, {"mode", "distance", "transform"})
        mode = self._tag(data, POSITION_MODES, key)

        if mode is Absolute:
            if data.get("transform") is None:
                raise MalformedConfigError("missing field 'transform'", key)
            self._warn_unused(data, {"distance"}, key)
            return Absolute(transform=self._parse_transform(data["transform"], _join(key, "transform")))

        # The sticky transform is runtime state, never taken from the document
        self._warn_unused(data, {"transform"}, key)
        if data.get("distance") is None:
            return mode()
        return mode(distance=self._parse_distance(data["distance"], _join(key, "distance")))

    def _warn_unused(self, data: dict[str, Any], keys: set[str], key: str) -> None:
        for name in keys & data.keys():
            if self.strict:
                raise MalformedConfigError(f"not valid for mode {data['mode']!r}", _join(key, name))
            logger.warning("Ignoring %r, not used by mode %r", _join(key, name), data["mode"])

    def _parse_distance(self, value: Any, key: str) -> float:
        """Read a distance, which must stay finite once narrowed to float32."""
        if not _is_number(value):
            raise MalformedConfigError("expected a finite number", key)
        try:
            with np.errstate(over="ignore"):
                distance = np.float32(float(value))
        except OverflowError:
            raise MalformedConfigError("number out of range", key) from None
        if not np.isfinite(distance):
            raise MalformedConfigError("expected a finite number", key)
        return float(distance)

    def _parse_transform(self, value: Any, key: str) -> Affine3:
        """Read a row-major 4x4 matrix and enforce the affine invariant."""
        if (
            not isinstance(value, list)
            or len(value) != 4
            or not all(isinstance(row, list) and len(row) == 4 for row in value)
        ):
            raise MalformedConfigError("expected a 4x4 list of numbers", key)
        if not all(_is_number(v) for row in value for v in row):
            raise MalformedConfigError("expected a 4x4 list of numbers", key)

        try:
            with np.errstate(over="ignore"):
                matrix = np.array(value, dtype=np.float32)
        except OverflowError:
            raise MalformedConfigError("transform entry out of range", key) from None
        if not np.isfinite(matrix).all():
            raise MalformedConfigError("transform entries must be finite float32 numbers", key)
        if not is_affine(matrix):
            raise InvalidTransformError(
                f"transform not affine, bottom row must be [0, 0, 0, 1], got {matrix[3].tolist()}",
                key,
            )
        return Affine3.from_matrix_unchecked(matrix)

    def _parse_display(self, data: Any, key: str) -> DisplayMode:
        data = self._mapping(data, key, {"mode", "projection_mode", "eye"})
        mode = self._tag(data, DISPLAY_MODES, key)

        if mode is Stereo:
            self._warn_unused(data, {"eye"}, key)
            if data.get("projection_mode") is None:
                return Stereo()
            return Stereo(projection_mode=self._parse_enum(
                data["projection_mode"], ProjectionMode, _join(key, "projection_mode")))
        if mode is Flat:
            self._warn_unused(data, {"projection_mode"}, key)
            if data.get("eye") is None:
                return Flat()
            return Flat(eye=self._parse_enum(data["eye"], Eye, _join(key, "eye")))

        self._warn_unused(data, {"projection_mode", "eye"}, key)
        return Direct()

    def _parse_enum(self, value: Any, enum_cls: type, key: str):
        if not isinstance(value, str):
            raise MalformedConfigError("expected a string", key)
        try:
            return enum_cls(value)
        except ValueError:
            raise UnknownVariantError(value, [m.value for m in enum_cls], key) from None

    def _parse_duration(self, value: Any, key: str):
        if _is_number(value):
            value = str(value)
        if not isinstance(value, str):
            raise MalformedConfigError("expected a duration such as '500ms'", key)
        try:
            return parse_duration(value)
        except ValueError as e:
            raise MalformedConfigError(str(e), key) from e

    def _parse_z_order(self, value: Any, key: str) -> int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise MalformedConfigError("expected an integer", key)
        if not 0 <= value <= U32_MAX:
            raise MalformedConfigError(f"must be between 0 and {U32_MAX}", key)
        return value

    def dump(self, config: Config) -> dict[str, Any]:
        """Convert a Config to its document form."""
        return {
            "backend": config.backend.value,
            "camera_device": config.camera_device,
            "overlay": {"position": dump_position(config.overlay.position)},
            "display": dump_display(config.display_mode),
            "toggle_button": config.toggle_button.value,
            "open_delay": format_duration(config.open_delay),
            "z_order": config.z_order,
            "debug": config.debug,
        }

    def dumps(self, config: Config) -> str:
        """Serialize a Config to a YAML string."""
        return yaml.safe_dump(self.dump(config), sort_keys=False)

    def save(self, config: Config, path: str | Path) -> None:
        """Write a Config to a YAML file.

        Raises:
            ConfigIOError: If the file cannot be written
        """
        path = Path(path)
        try:
            path.write_text(self.dumps(config), encoding="utf-8")
        except OSError as e:
            raise ConfigIOError(f"cannot write {path}: {e}") from e
        logger.info("Saved configuration to %s", path)


def dump_position(position: PositionMode) -> dict[str, Any]:
    """Document form of an overlay position.

    The sticky transform is runtime state and is left out.
    """
    if isinstance(position, Absolute):
        return {"mode": Absolute.MODE, "transform": position.transform.to_rows()}
    if isinstance(position, (HeadLocked, Sticky)):
        return {"mode": position.MODE, "distance": float(position.distance)}
    raise TypeError(f"Unknown position mode: {position!r}")


def dump_display(display: DisplayMode) -> dict[str, Any]:
    """Document form of a display mode."""
    if isinstance(display, Stereo):
        return {"mode": Stereo.MODE, "projection_mode": display.projection_mode.value}
    if isinstance(display, Flat):
        return {"mode": Flat.MODE, "eye": display.eye.value}
    if isinstance(display, Direct):
        return {"mode": Direct.MODE}
    raise TypeError(f"Unknown display mode: {display!r}")
