"""Configuration dataclasses and YAML loader for the Linus's Law CA simulation."""

from dataclasses import dataclass, field
import numbers
from typing import List, Dict, Any, Optional
from pathlib import Path
import yaml


RNG_STREAM_MODES = ("shared", "per_agent")


class ConfigError(ValueError):
    """Raised when a configuration value cannot be used to build a world."""


@dataclass
class GridConfig:
    width: int
    height: int
    existence_ratio: float = 1.0  # fraction of positions hosting an object
    torus: bool = False


@dataclass
class SelectionConfig:
    radius: int = 1
    prioritized: bool = True       # False = uniform neighbour choice
    creation_priority: float = 0.5  # weight of not-yet-mapped cells


@dataclass
class QualityConfig:
    error_ceiling: float = 40.0  # initial positional error (m)
    error_cap: float = 45.0      # proposals above this are redrawn once


@dataclass
class BehaviorConfig:
    name: str
    count: int
    frequency: int
    mean_error: float
    var_error: float
    hold_on_zero_weight: bool = False


@dataclass
class SimulationConfig:
    grid: GridConfig
    selection: SelectionConfig
    quality: QualityConfig
    behaviors: List[BehaviorConfig]
    horizon: int

    seed: Optional[int] = None
    rng_streams: str = "shared"

    # Export flags (can be overridden by CLI)
    csv_enabled: bool = True
    snapshot_enabled: bool = True
    gif_enabled: bool = False
    quiet: bool = False
    out_dir: Path = field(default_factory=lambda: Path("./output"))


def casual_behavior(count: int = 50, frequency: int = 1) -> BehaviorConfig:
    return BehaviorConfig(name="casual", count=count, frequency=frequency,
                          mean_error=15.0, var_error=60.0)


def senior_behavior(count: int = 5, frequency: int = 3) -> BehaviorConfig:
    return BehaviorConfig(name="senior", count=count, frequency=frequency,
                          mean_error=5.0, var_error=10.0,
                          hold_on_zero_weight=True)


def default_config() -> SimulationConfig:
    """Stock two-class scenario used when no YAML file is given."""
    return SimulationConfig(
        grid=GridConfig(width=30, height=30, existence_ratio=0.9),
        selection=SelectionConfig(radius=2, prioritized=True,
                                  creation_priority=0.5),
        quality=QualityConfig(),
        behaviors=[casual_behavior(), senior_behavior()],
        horizon=200,
    )


def _require_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigError(f"{name} must be an integer, got {value!r}")


def validate_config(config: SimulationConfig) -> None:
    """
    Reject configurations that cannot describe a world.

    Runs before any simulation state is built; raises ConfigError naming
    the offending field.
    """
    _require_int("grid width", config.grid.width)
    _require_int("grid height", config.grid.height)
    _require_int("radius", config.selection.radius)
    _require_int("horizon", config.horizon)
    for b in config.behaviors:
        _require_int(f"{b.name}: count", b.count)
        _require_int(f"{b.name}: frequency", b.frequency)

    grid = config.grid
    if grid.width <= 0 or grid.height <= 0:
        raise ConfigError(
            f"grid dimensions must be positive, got {grid.width}x{grid.height}")
    if not 0.0 <= grid.existence_ratio <= 1.0:
        raise ConfigError(
            f"existence_ratio must be in [0, 1], got {grid.existence_ratio}")

    selection = config.selection
    if selection.radius <= 0:
        raise ConfigError(f"radius must be positive, got {selection.radius}")
    if not 0.0 <= selection.creation_priority <= 1.0:
        raise ConfigError(
            "creation_priority must be in [0, 1], "
            f"got {selection.creation_priority}")

    if config.quality.error_ceiling <= 0:
        raise ConfigError(
            f"error_ceiling must be positive, got {config.quality.error_ceiling}")
    if config.quality.error_cap <= 0:
        raise ConfigError(
            f"error_cap must be positive, got {config.quality.error_cap}")

    if config.horizon < 0:
        raise ConfigError(f"horizon must be non-negative, got {config.horizon}")
    if config.rng_streams not in RNG_STREAM_MODES:
        raise ConfigError(
            f"rng_streams must be one of {RNG_STREAM_MODES}, "
            f"got {config.rng_streams!r}")

    seen = set()
    for b in config.behaviors:
        if b.name in seen:
            raise ConfigError(f"duplicate behavior class: {b.name}")
        seen.add(b.name)
        if b.count < 0:
            raise ConfigError(f"{b.name}: count must be non-negative, got {b.count}")
        if b.frequency < 0:
            raise ConfigError(
                f"{b.name}: frequency must be non-negative, got {b.frequency}")
        if b.mean_error < 0:
            raise ConfigError(
                f"{b.name}: mean_error must be non-negative, got {b.mean_error}")
        if b.var_error <= 0:
            raise ConfigError(
                f"{b.name}: var_error must be positive, got {b.var_error}")


def _parse_int(value: Any, name: str) -> int:
    """Integer config value from YAML; 10.0 is accepted, 10.5 is not."""
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    try:
        as_float = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e
    if not as_float.is_integer():
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    return int(as_float)


_BEHAVIOR_KEYS = {'name', 'count', 'frequency', 'mean_error', 'var_error',
                  'hold_on_zero_weight'}


def _parse_behaviors(behaviors_raw: List[Dict[str, Any]]) -> List[BehaviorConfig]:
    """Parse behavior class specifications from raw YAML data."""
    behaviors = []
    for b in behaviors_raw:
        unknown = set(b) - _BEHAVIOR_KEYS
        if unknown:
            raise ConfigError(f"Unknown behavior keys: {sorted(unknown)}")
        try:
            behaviors.append(BehaviorConfig(
                name=b['name'],
                count=_parse_int(b.get('count', 0), f"{b['name']}: count"),
                frequency=_parse_int(b.get('frequency', 1),
                                     f"{b['name']}: frequency"),
                mean_error=float(b['mean_error']),
                var_error=float(b['var_error']),
                hold_on_zero_weight=bool(b.get('hold_on_zero_weight', False))
            ))
        except KeyError as e:
            raise ConfigError(f"behavior is missing required key {e}") from e
    return behaviors


def load_config(config_path: Path) -> SimulationConfig:
    """Load and validate YAML configuration file."""
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    defaults = default_config()

    grid_raw = raw.get('grid', {})
    grid = GridConfig(
        width=_parse_int(grid_raw.get('width', defaults.grid.width), 'grid width'),
        height=_parse_int(grid_raw.get('height', defaults.grid.height),
                          'grid height'),
        existence_ratio=grid_raw.get('existence_ratio',
                                     defaults.grid.existence_ratio),
        torus=grid_raw.get('torus', False)
    )

    sel_raw = raw.get('selection', {})
    selection = SelectionConfig(
        radius=_parse_int(sel_raw.get('radius', defaults.selection.radius),
                          'radius'),
        prioritized=sel_raw.get('prioritized', True),
        creation_priority=sel_raw.get('creation_priority',
                                      defaults.selection.creation_priority)
    )

    q_raw = raw.get('quality', {})
    quality = QualityConfig(
        error_ceiling=q_raw.get('error_ceiling', 40.0),
        error_cap=q_raw.get('error_cap', 45.0)
    )

    if 'behaviors' in raw:
        behaviors = _parse_behaviors(raw['behaviors'])
    else:
        behaviors = defaults.behaviors

    sim_raw = raw.get('simulation', {})

    # Parse export config (optional)
    export_raw = raw.get('export', {})

    config = SimulationConfig(
        grid=grid,
        selection=selection,
        quality=quality,
        behaviors=behaviors,
        horizon=_parse_int(sim_raw.get('horizon', defaults.horizon), 'horizon'),
        seed=sim_raw.get('seed'),
        rng_streams=sim_raw.get('rng_streams', 'shared'),
        csv_enabled=export_raw.get('csv', True),
        snapshot_enabled=export_raw.get('snapshot', True),
        gif_enabled=export_raw.get('gif', False)
    )
    validate_config(config)
    return config
