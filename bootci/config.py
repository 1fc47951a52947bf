"""Configuration system with YAML parsing and Pydantic validation"""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, model_validator

from bootci.resample.schemes import Flat, Grouped, ResamplingScheme


class DatasetConfig(BaseModel):
    """Dataset configuration."""
    path: str
    columns: list[str] | None = Field(default=None, description="Numeric columns to load (default: all)")
    group_column: str | None = Field(default=None, description="Column holding group labels")


class ResamplingConfig(BaseModel):
    """Resampling scheme configuration."""
    scheme: Literal["flat", "grouped"] = "flat"
    group_key: str | None = None

    @model_validator(mode="after")
    def _grouped_needs_key(self) -> "ResamplingConfig":
        if self.scheme == "grouped" and not self.group_key:
            raise ValueError("resampling.group_key is required for the grouped scheme")
        return self

    def to_scheme(self) -> ResamplingScheme:
        if self.scheme == "grouped":
            return Grouped(group_key=self.group_key)
        return Flat()


class StatisticConfig(BaseModel):
    """Statistic configuration (registry name plus constructor params)."""
    name: str
    params: dict[str, Any] = Field(default_factory=dict)


class BootstrapConfig(BaseModel):
    """Bootstrap run configuration."""
    replicates: int = Field(default=1000, ge=1)
    seed: int = Field(default=1337, ge=0)
    confidence_level: float = Field(default=0.95, gt=0.0, lt=1.0)
    max_workers: int = Field(default=1, ge=1)
    failure_threshold: float | None = Field(default=None, ge=0.0, le=1.0)


class OutputConfig(BaseModel):
    """Output configuration."""
    runs_dir: str = "runs"


class ExperimentConfig(BaseModel):
    """Complete experiment configuration."""
    experiment_name: str
    dataset: DatasetConfig
    statistic: StatisticConfig
    resampling: ResamplingConfig = Field(default_factory=ResamplingConfig)
    bootstrap: BootstrapConfig = Field(default_factory=BootstrapConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def load_config(config_path: str | Path) -> ExperimentConfig:
    """Load and validate YAML config file."""
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return ExperimentConfig(**data)
