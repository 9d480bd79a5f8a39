"""Exceptions raised by the performance modeler."""


class PerfModelError(Exception):
    """Base class for performance modeler errors."""


class InsufficientDataError(PerfModelError):
    """No benchmark data exists for the requested model."""

    def __init__(self, model_name: str):
        self.model_name = model_name
        super().__init__(
            f"Insufficient data for modeling '{model_name}'. Need at least some benchmark data."
        )


class IngestError(PerfModelError):
    """Uploaded benchmark data could not be parsed."""
