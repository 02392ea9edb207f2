"""
Run settings for the packing engine.

Settings are pydantic models so that values coming from YAML files or the
command line are validated once, at the boundary.  The engine itself only
reads plain attributes from them.

Classes:
    GeneratorConfig   — container extents, item count, min side, SA budget
    PackingConfig     — strategy, support threshold, weighting heuristic
    BenchmarkConfig   — number of benchmark runs, notifications
    SimulatorSettings — all of the above plus an optional random seed

Example YAML:
    seed: 42
    generator:
      max_items: 40
      min_side_len: 300
    packing:
      strategy: ffd
      min_support: 0.75
"""

from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from ems_packing.core.models import Dimensions, PackingStrategy, WeightingHeuristic
from ems_packing.errors import ConfigurationError

# Default container (a 20 ft shipping container interior, mm).
DEFAULT_CONTAINER_DIMS = Dimensions(width=5870, depth=2330, height=2200)


class GeneratorConfig(BaseModel):
    """Synthetic item set and optimizer budget."""
    container_width: float = Field(DEFAULT_CONTAINER_DIMS.width, gt=0)
    container_depth: float = Field(DEFAULT_CONTAINER_DIMS.depth, gt=0)
    container_height: float = Field(DEFAULT_CONTAINER_DIMS.height, gt=0)
    max_items: int = Field(30, ge=1, description="Target number of items")
    min_side_len: float = Field(400, gt=0, description="Minimum item side length")
    sa_iterations: int = Field(500, ge=0, description="Simulated annealing iterations")

    @model_validator(mode="after")
    def _check_min_side(self) -> "GeneratorConfig":
        largest = max(self.container_width, self.container_depth, self.container_height)
        if self.min_side_len >= largest:
            raise ValueError(
                f"min_side_len={self.min_side_len} must be smaller than the "
                f"largest container extent ({largest})"
            )
        return self

    @property
    def container_dims(self) -> Dimensions:
        return Dimensions(self.container_width, self.container_depth, self.container_height)


class PackingConfig(BaseModel):
    """How a single run places items."""
    strategy: PackingStrategy = Field(
        PackingStrategy.FIRST_FIT_DECREASING, description="ff, ffd, ffh or conflict-graph",
    )
    min_support: float = Field(0.6, ge=0.0, le=1.0)
    heuristic: WeightingHeuristic = Field(
        WeightingHeuristic.VOLUME, description="volume, corner, stability or future-space",
    )


class BenchmarkConfig(BaseModel):
    runs: int = Field(10, ge=1)
    notify: bool = False


class SimulatorSettings(BaseModel):
    """Everything a command-line run needs."""
    seed: Optional[int] = None
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    packing: PackingConfig = Field(default_factory=PackingConfig)
    benchmark: BenchmarkConfig = Field(default_factory=BenchmarkConfig)


def load_settings(path: Optional[Union[str, Path]] = None) -> SimulatorSettings:
    """
    Load settings from a YAML file (defaults when *path* is None).

    Raises:
        ConfigurationError: the file is missing, is not valid YAML, or
                            fails validation.
    """
    if path is None:
        return SimulatorSettings()

    path = Path(path)
    try:
        raw = yaml.safe_load(path.read_text()) or {}
    except OSError as exc:
        raise ConfigurationError(f"Cannot read settings file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc

    return parse_settings(raw)


def parse_settings(raw: dict) -> SimulatorSettings:
    """Validate an already-parsed settings mapping."""
    if not isinstance(raw, dict):
        raise ConfigurationError("Settings must be a mapping")
    try:
        return SimulatorSettings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc
