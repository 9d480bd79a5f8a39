"""Performance modeling API routes."""

import csv
import io
import re
import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from perfmodel.core.config import ModelingSettings
from perfmodel.core.errors import InsufficientDataError
from perfmodel.core.models import LATENCY_METRICS, PredictionResult

from perfmodel_api.logging_config import get_logger, log_modeling_event
from perfmodel_api.models.schemas import ExportRequest, PredictRequest
from perfmodel_api.routers.benchmarks import get_db
from perfmodel_api.services.modeling_service import ModelingService

# Logger
logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/modeling", tags=["modeling"])

_service: Optional[ModelingService] = None

# Same column layout as benchmark uploads, so exported predictions can be re-imported
EXPORT_COLUMNS = [
    "provider_name", "provider_model", "traffic_mode", "traffic_level",
    "input_avg_len", "input_stdev_len", "input_min_len", "input_max_len", "input_total_tokens",
    "output_avg_len", "output_stdev_len", "output_min_len", "output_max_len", "output_total_tokens",
    *LATENCY_METRICS[0:8], "ttft_distribution",
    *LATENCY_METRICS[8:16], "user_tps_distribution",
    *LATENCY_METRICS[16:24], "e2e_distribution",
    "summary_total_num_requests", "summary_total_elapsed_time_s", "summary_job_level_tps",
    "summary_actual_qps", "summary_num_failed_requests",
    "per_gpu_num_gpus", "per_gpu_tps_mean", "per_gpu_tps_stdev", "acceptance_rate", "hf_dataset_name",
]


def get_modeling_service() -> ModelingService:
    """Get modeling service instance."""
    global _service
    if _service is None:
        _service = ModelingService(get_db(), ModelingSettings.from_env())
    return _service


@router.get("/models", response_model=list[str])
async def list_modeling_models(
    service: ModelingService = Depends(get_modeling_service),
) -> list[str]:
    """List models available for modeling."""
    return service.list_models()


@router.post("/predict", response_model=PredictionResult)
async def predict_performance(
    request: PredictRequest,
    service: ModelingService = Depends(get_modeling_service),
) -> PredictionResult:
    """Predict performance metrics at the requested input/output tokens.

    When traffic_level is given every metric is fit against input tokens,
    output tokens and traffic level. Otherwise E2E mean is derived from the
    predicted TTFT and per-user TPS.
    """
    logger.info(
        "prediction_request_received",
        model=request.model,
        input_tokens=request.input_tokens,
        output_tokens=request.output_tokens,
        traffic_level=request.traffic_level,
        method=request.method.value,
    )

    try:
        result = service.predict(request.to_core())
    except InsufficientDataError as e:
        logger.warning("prediction_no_data", model=request.model)
        raise HTTPException(status_code=404, detail=str(e))

    log_modeling_event(
        "prediction_completed",
        model=request.model,
        extra={
            "method": result.method,
            "confidence": result.confidence,
            "num_observations_used": result.num_observations_used,
        },
    )
    return result


@router.post("/export")
async def export_prediction(request: ExportRequest) -> Response:
    """Export a prediction as a single-row benchmark CSV."""
    result = request.result
    safe_model = re.sub(r"[^a-zA-Z0-9]", "_", result.model_name)
    filename = f"prediction-{safe_model}-{int(time.time() * 1000)}.csv"

    return Response(
        content=_export_to_csv(result),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _export_to_csv(result: PredictionResult) -> str:
    """Convert a prediction result to CSV in the benchmark upload layout."""
    predictions = result.predictions.model_dump()
    tokens_in = result.input_tokens
    tokens_out = result.output_tokens

    row = {
        "provider_name": "predicted",
        "provider_model": result.model_name,
        "traffic_mode": "prediction",
        "traffic_level": result.traffic_level if result.traffic_level is not None else "",
        "input_avg_len": tokens_in,
        "input_min_len": tokens_in,
        "input_max_len": tokens_in,
        "input_total_tokens": tokens_in,
        "output_avg_len": tokens_out,
        "output_min_len": tokens_out,
        "output_max_len": tokens_out,
        "output_total_tokens": tokens_out,
        "summary_total_num_requests": 1,
        "summary_job_level_tps": predictions["throughput"],
        "summary_num_failed_requests": 0,
    }
    row.update({metric: predictions[metric] for metric in LATENCY_METRICS})

    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    writer.writerow([row.get(column, "") for column in EXPORT_COLUMNS])
    return output.getvalue()
