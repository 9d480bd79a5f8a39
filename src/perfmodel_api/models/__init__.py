"""API models and schemas."""

from perfmodel_api.models.schemas import (
    DeleteResponse,
    ExportRequest,
    PredictRequest,
    UploadResponse,
)

__all__ = [
    "DeleteResponse",
    "ExportRequest",
    "PredictRequest",
    "UploadResponse",
]
