"""Configuration management for blastoff."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, Dict, Any
import yaml

from blastoff.constants import (
    DEFAULT_MAX_SEPARATION,
    DEFAULT_MIN_SCORE,
    DEFAULT_MIN_SEPARATION,
    DEFAULT_READS,
    DEFAULT_SEED,
    DISTANCE_TOLERANCE,
    FRAGMENT_LENGTH,
    MAX_SEED,
    MIN_ALIGNMENT_LENGTH,
    MIN_SEED,
)
from blastoff.exceptions import ConfigurationError


FETCHER_CHOICES = ("xdget", "memory")


def _is_int(value: Any) -> bool:
    # YAML booleans load as bool, which is an int subclass
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class SimulationConfig:
    """Mate-pair simulation parameters."""

    reads: int = DEFAULT_READS
    seed: int = DEFAULT_SEED
    min_separation: int = DEFAULT_MIN_SEPARATION
    max_separation: int = DEFAULT_MAX_SEPARATION
    fragment_length: int = FRAGMENT_LENGTH
    # 'xdget' fetches windows from the indexed reference, 'memory' from SeqIO
    fetcher: str = "xdget"


@dataclass
class AlignmentConfig:
    """Aligner and concordance parameters."""

    min_score: int = DEFAULT_MIN_SCORE
    min_alignment_length: int = MIN_ALIGNMENT_LENGTH
    tolerance: float = DISTANCE_TOLERANCE
    # Keep aligner output on disk and reuse it on later runs
    save_alignments: bool = False


@dataclass
class RuntimeConfig:
    """Runtime configuration."""

    log_level: str = "WARNING"
    log_file: Optional[Path] = None
    work_dir: Path = Path(".")
    csv: bool = False


@dataclass
class Config:
    """Main configuration class."""

    # Required parameters (set via CLI or config file)
    reference: Optional[Path] = None
    assembly: Optional[Path] = None

    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    alignment: AlignmentConfig = field(default_factory=AlignmentConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)

    # Convenience properties
    @property
    def seed(self) -> int:
        return self.simulation.seed

    @property
    def reads(self) -> int:
        return self.simulation.reads

    def separations(self) -> list[int]:
        """Separation levels doubling from min to max, inclusive."""
        start = self.simulation.min_separation
        if not _is_int(start) or start < 1:
            raise ConfigurationError(f"min_separation must be an integer >= 1, got {start!r}")
        levels = []
        level = self.simulation.min_separation
        while level <= self.simulation.max_separation:
            levels.append(level)
            level *= 2
        return levels

    def validate(self) -> None:
        """Validate configuration."""
        if not self.reference:
            raise ConfigurationError("Reference genome is required")
        if not self.assembly:
            raise ConfigurationError("Assembly is required")
        if not self.reference.exists():
            raise ConfigurationError(f"Reference file not found: {self.reference}")
        if not self.assembly.exists():
            raise ConfigurationError(f"Assembly file not found: {self.assembly}")

        sim = self.simulation
        for key in ("reads", "min_separation", "max_separation", "fragment_length"):
            value = getattr(sim, key)
            if not _is_int(value):
                raise ConfigurationError(f"{key} must be an integer, got {value!r}")
        if not _is_int(sim.seed) or not MIN_SEED <= sim.seed <= MAX_SEED:
            raise ConfigurationError(
                f"bad seed {sim.seed!r}: must be an integer in {MIN_SEED}..{MAX_SEED}"
            )
        if sim.reads < 1:
            raise ConfigurationError("reads must be >= 1")
        if sim.min_separation < 1:
            raise ConfigurationError("min_separation must be >= 1")
        if sim.max_separation < sim.min_separation:
            raise ConfigurationError("max_separation must be >= min_separation")
        if sim.fragment_length < 1:
            raise ConfigurationError("fragment_length must be >= 1")
        if sim.fetcher not in FETCHER_CHOICES:
            raise ConfigurationError(
                f"Unknown fetcher '{sim.fetcher}' (choose from {', '.join(FETCHER_CHOICES)})"
            )

        aln = self.alignment
        for key in ("min_score", "min_alignment_length"):
            value = getattr(aln, key)
            if not _is_int(value):
                raise ConfigurationError(f"{key} must be an integer, got {value!r}")
        if isinstance(aln.tolerance, bool) or not isinstance(aln.tolerance, (int, float)):
            raise ConfigurationError(f"tolerance must be a number, got {aln.tolerance!r}")
        if not 0 <= self.alignment.tolerance < 1:
            raise ConfigurationError("tolerance must be in [0, 1)")
        if self.alignment.min_alignment_length < 0:
            raise ConfigurationError("min_alignment_length must be >= 0")
        if not isinstance(logging.getLevelName(str(self.runtime.log_level).upper()), int):
            raise ConfigurationError(f"Unknown log level '{self.runtime.log_level}'")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""

        def path_to_str(obj):
            if isinstance(obj, Path):
                return str(obj)
            elif isinstance(obj, dict):
                return {k: path_to_str(v) for k, v in obj.items()}
            elif isinstance(obj, (list, tuple)):
                return [path_to_str(item) for item in obj]
            return obj

        return path_to_str(asdict(self))


def load_config(path: Path) -> Config:
    """Load configuration from YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {path}")

    cfg = Config()

    if data.get("reference") is not None:
        cfg.reference = Path(data["reference"])
    if data.get("assembly") is not None:
        cfg.assembly = Path(data["assembly"])

    sections = {
        "simulation": cfg.simulation,
        "alignment": cfg.alignment,
        "runtime": cfg.runtime,
    }
    unknown = sorted(set(data) - set(sections) - {"reference", "assembly"})
    if unknown:
        raise ConfigurationError("Unsupported config option(s): " + ", ".join(unknown))

    for section_name, section in sections.items():
        values = data.get(section_name) or {}
        if not isinstance(values, dict):
            raise ConfigurationError(f"Section '{section_name}' must be a mapping")
        for key, value in values.items():
            if not hasattr(section, key):
                raise ConfigurationError(f"Unknown option '{section_name}.{key}'")
            if key in ("log_file", "work_dir") and value is not None:
                value = Path(value)
            setattr(section, key, value)

    return cfg

