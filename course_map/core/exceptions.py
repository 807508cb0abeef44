"""Unified pipeline exception taxonomy.

Every domain exception inherits from ``PipelineError`` and carries
structured context fields so the CLI and the HTTP surface can report
failures consistently.

Taxonomy categories
-------------------
- ``ValidationError``   - bad input (document, geometry, query parameters).
- ``TransientError``    - temporary failures (``StoreConnectionError``).
- ``PermanentError``    - unrecoverable failures (e.g. artifact write).
- ``ContractError``     - a caller broke an internal contract.

Nothing in the pipeline retries automatically. ``retryable`` only tells
the caller whether re-running unchanged might succeed.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all pipeline-domain errors.

    Attributes:
        message: Human-readable error description.
        stage: Pipeline stage where the error occurred
            (e.g. ``"decode_geometry"``, ``"store"``).
        code: Machine-readable error code (e.g. ``"GEOMETRY_MALFORMED_COORDINATE"``).
        retryable: Whether re-running the same operation may succeed.
        correlation_id: Run correlation identifier.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, TransientError):
            return "transient"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(PipelineError):
    """Input validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(PipelineError):
    """Temporary failure that may succeed when the caller re-runs."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(PipelineError):
    """Unrecoverable failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(PipelineError):
    """A caller violated an internal contract. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Store errors
# ---------------------------------------------------------------------------


class StoreError(PipelineError):
    """Raised when the spatial store fails during a read or a write.

    A failure inside a transaction rolls the whole unit back.
    Connection failures raise ``StoreConnectionError`` (retryable).
    """

    default_stage = "store"
    default_code = "STORE_FAILED"


class StoreConnectionError(StoreError, TransientError):
    """Raised when the store cannot be reached.  Re-running may succeed."""

    default_code = "STORE_CONNECTION_FAILED"
