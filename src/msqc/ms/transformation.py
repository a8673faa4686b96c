"""Retention-time transformations produced by map alignment."""

from typing import Literal

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

__all__ = ['TransformationDescription']


class TransformationDescription(BaseModel):
    """Maps retention times of one run onto the aligned reference scale.

    Models
    ------
    identity : rt -> rt
    linear : rt -> slope * rt + intercept
    interpolated : piecewise linear through ``data_points`` (x sorted),
        constant extrapolation outside the covered range
    """

    model_config = ConfigDict(extra='forbid')

    kind: Literal["identity", "linear", "interpolated"] = "identity"
    slope: float = 1.0
    intercept: float = 0.0
    data_points: list[tuple[float, float]] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_data_points(self):
        if self.kind == "interpolated" and len(self.data_points) < 2:
            raise ValueError("interpolated model needs at least two data points")
        return self

    def apply(self, value: float) -> float:
        if self.kind == "linear":
            return self.slope * value + self.intercept
        if self.kind == "interpolated":
            points = np.array(sorted(self.data_points), dtype=float)
            return float(np.interp(value, points[:, 0], points[:, 1]))
        return float(value)
