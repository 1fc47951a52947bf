"""Pydantic schemas for statistic results and interval artifacts"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class StatisticResult(BaseModel):
    """Ordered, named tuple of real-valued scalars produced by one statistic evaluation."""
    model_config = ConfigDict(frozen=True)

    values: dict[str, float] = Field(..., description="Dimension name -> value, in declaration order")

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self.values)

    def as_tuple(self) -> tuple[float, ...]:
        return tuple(self.values.values())


class ConfidenceInterval(BaseModel):
    """Percentile interval for one statistic dimension."""
    model_config = ConfigDict(frozen=True)

    name: str
    lower: float
    upper: float
    confidence_level: float = Field(..., gt=0.0, lt=1.0)

    @model_validator(mode="after")
    def _check_bounds(self) -> "ConfidenceInterval":
        if self.lower > self.upper:
            raise ValueError(f"lower bound {self.lower} exceeds upper bound {self.upper}")
        return self


class DimensionSummary(BaseModel):
    """Point estimate, bootstrap moments and interval for one dimension."""
    name: str
    observed: float | None = Field(None, description="Statistic evaluated on the full dataset")
    bootstrap_mean: float
    std_error: float
    interval: ConfidenceInterval


class IntervalReport(BaseModel):
    """Everything a reporting collaborator needs from one bootstrap run."""
    replicates: int = Field(..., ge=1, description="Requested replicate count R")
    successful: int = Field(..., ge=0, description="R - failure_count")
    failure_count: int = Field(..., ge=0)
    confidence_level: float = Field(..., gt=0.0, lt=1.0)
    threshold_exceeded: bool = False
    dimensions: list[DimensionSummary]

    def to_dict(self) -> dict:
        """Convert to dict for JSON storage."""
        return self.model_dump()
