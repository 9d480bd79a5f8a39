"""Tunable constants for the prediction engine."""

import os
from typing import Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "PERFMODEL_"


class ModelingSettings(BaseModel):
    """Empirical thresholds used by fitting, method selection and confidence scoring."""

    # Confidence scoring
    high_confidence_distance: float = Field(
        default=0.1, ge=0.0, description="Max normalized distance for 'high' confidence"
    )
    medium_confidence_distance: float = Field(
        default=0.3, ge=0.0, description="Max normalized distance for 'medium' confidence"
    )

    # Linearity detection
    linearity_min_improvement: float = Field(
        default=0.10, description="R² gain polynomial must add over linear to be chosen"
    )
    linearity_r2_threshold: float = Field(
        default=0.85, description="Linear R² above which linear is always chosen"
    )

    # Solver
    solver_iterations: int = Field(default=100, ge=1, description="Gauss-Seidel sweeps")
    singular_epsilon: float = Field(
        default=1e-10, gt=0.0, description="Determinant/diagonal magnitude treated as zero"
    )

    # Data handling
    default_traffic_level: float = Field(
        default=0.5, description="Traffic level assumed for observations without one"
    )
    fallback_ms_per_output_token: float = Field(
        default=10.0, gt=0.0, description="Generation time per token when TPS is unusable"
    )
    min_polynomial_observations: int = Field(
        default=3, ge=1, description="Observations required for polynomial regression"
    )

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "ModelingSettings":
        """Build settings from PERFMODEL_* environment variables.

        Unset variables keep their defaults, e.g. PERFMODEL_SOLVER_ITERATIONS=200.
        """
        environ = os.environ if environ is None else environ
        overrides = {}
        for name in cls.model_fields:
            value = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if value is not None and value != "":
                overrides[name] = value
        return cls(**overrides)
