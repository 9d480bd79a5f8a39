"""API request/response schemas."""

from typing import Optional

from pydantic import BaseModel, Field

from perfmodel.core.models import PredictionMethod, PredictionRequest, PredictionResult


class UploadResponse(BaseModel):
    """Benchmark upload response."""

    success: bool = Field(default=True, description="Upload succeeded")
    benchmark_id: str = Field(description="Assigned benchmark identifier")
    rows_inserted: int = Field(description="Rows stored")


class DeleteResponse(BaseModel):
    """Benchmark delete response."""

    success: bool = Field(default=True, description="Delete succeeded")
    deleted: int = Field(description="Rows deleted")


class PredictRequest(BaseModel):
    """Performance prediction request."""

    model: str = Field(min_length=1, description="Model name")
    input_tokens: float = Field(gt=0, description="Target input tokens")
    output_tokens: float = Field(gt=0, description="Target output tokens")
    traffic_level: Optional[float] = Field(
        default=None, gt=0, description="QPS or concurrency level (enables 3D regression)"
    )
    method: PredictionMethod = Field(
        default=PredictionMethod.AUTO_DETECT,
        description="Prediction method (auto_detect, polynomial, linear, average)",
    )

    def to_core(self) -> PredictionRequest:
        return PredictionRequest(
            model_name=self.model,
            target_input_tokens=self.input_tokens,
            target_output_tokens=self.output_tokens,
            target_traffic_level=self.traffic_level,
            method=self.method,
        )


class ExportRequest(BaseModel):
    """Prediction export request."""

    result: PredictionResult = Field(description="Prediction result to export")
