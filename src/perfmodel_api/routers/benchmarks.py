"""Benchmark storage API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from perfmodel.core.errors import IngestError
from perfmodel.core.models import BenchmarkSummary, ModelSummary
from perfmodel.database import Database

from perfmodel_api.auth import APIKeyAuth
from perfmodel_api.logging_config import get_logger
from perfmodel_api.models.schemas import DeleteResponse, UploadResponse
from perfmodel_api.services.benchmark_service import BenchmarkService

# Logger
logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/benchmarks", tags=["benchmarks"])

# Database and service instances (singleton pattern)
_db: Optional[Database] = None
_service: Optional[BenchmarkService] = None


def get_db() -> Database:
    """Get database instance."""
    global _db
    if _db is None:
        _db = Database()
    return _db


def get_service() -> BenchmarkService:
    """Get benchmark service instance."""
    global _service
    if _service is None:
        _service = BenchmarkService(get_db())
    return _service


@router.post(
    "/upload",
    response_model=UploadResponse,
    dependencies=[Depends(APIKeyAuth(required=True))],
)
async def upload_benchmark(
    file: UploadFile = File(...),
    service: BenchmarkService = Depends(get_service),
) -> UploadResponse:
    """Upload a benchmark CSV.

    Requires API key authentication via X-API-Key header.

    Every row of the file is stored under a newly assigned benchmark id.
    """
    filename = file.filename or ""
    if not filename.lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="Only CSV files are allowed")

    content = await file.read()
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV file must be UTF-8 encoded")

    try:
        result = service.upload(text)
    except IngestError as e:
        logger.warning("benchmark_upload_rejected", filename=filename, error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(
        "benchmark_uploaded",
        benchmark_id=result.benchmark_id,
        rows_inserted=result.rows_inserted,
        filename=filename,
    )

    return UploadResponse(
        benchmark_id=result.benchmark_id,
        rows_inserted=result.rows_inserted,
    )


@router.get("/models", response_model=list[ModelSummary])
async def list_models(
    service: BenchmarkService = Depends(get_service),
) -> list[ModelSummary]:
    """List models with their benchmark coverage."""
    return service.list_models()


@router.get("/models/{model:path}/benchmarks", response_model=list[BenchmarkSummary])
async def list_model_benchmarks(
    model: str,
    service: BenchmarkService = Depends(get_service),
) -> list[BenchmarkSummary]:
    """List uploaded benchmarks for a model."""
    return service.list_benchmarks(model)


@router.get("/{benchmark_id}")
async def get_benchmark(
    benchmark_id: str,
    service: BenchmarkService = Depends(get_service),
) -> list[dict]:
    """Get every stored row of a benchmark."""
    rows = service.get_benchmark(benchmark_id)
    if not rows:
        raise HTTPException(status_code=404, detail="Benchmark not found")
    return rows


@router.delete(
    "/{benchmark_id}",
    response_model=DeleteResponse,
    dependencies=[Depends(APIKeyAuth(required=True))],
)
async def delete_benchmark(
    benchmark_id: str,
    service: BenchmarkService = Depends(get_service),
) -> DeleteResponse:
    """Delete a benchmark.

    Requires API key authentication via X-API-Key header.
    """
    logger.info("benchmark_delete_request", benchmark_id=benchmark_id)

    deleted = service.delete_benchmark(benchmark_id)
    if deleted == 0:
        raise HTTPException(status_code=404, detail="Benchmark not found")

    logger.info("benchmark_deleted", benchmark_id=benchmark_id, rows=deleted)
    return DeleteResponse(deleted=deleted)
