"""Modeling service wrapping the prediction engine."""

from typing import Optional

from perfmodel.core import InsufficientDataError, ModelingSettings, PerformancePredictor
from perfmodel.core.models import PredictionRequest, PredictionResult
from perfmodel.database import Database


class ModelingService:
    """Service for performance predictions against stored benchmarks."""

    def __init__(self, db: Database, settings: Optional[ModelingSettings] = None):
        self.db = db
        self.predictor = PerformancePredictor(settings=settings, source=db)

    def predict(self, request: PredictionRequest) -> PredictionResult:
        """Predict metrics for a model at the requested operating point.

        Raises:
            InsufficientDataError: If the model has no benchmark data.
        """
        result = self.predictor.predict_for_model(request)
        if result is None:
            raise InsufficientDataError(request.model_name)
        return result

    def list_models(self) -> list[str]:
        """Models with benchmark data (no minimum row count)."""
        return self.db.list_model_names()
