"""Operation result types and status enums.

Standardized result types for channel sends and provider calls, plus the
classifier that turns provider HTTP exceptions into results.
"""

from infrastructure.operations.classifiers import classify_http_error
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_http_error",
]
