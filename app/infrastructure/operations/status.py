"""Operation status enumeration.

Status codes for operation results, used to classify outcomes of channel
sends and provider calls.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: Operation completed successfully
        TRANSIENT_ERROR: Error that may clear up later (network, timeout, rate limit)
        PERMANENT_ERROR: Error that will not clear up (validation, auth, config)
        UNAUTHORIZED: Provider rejected the credentials
        NOT_FOUND: Resource not found
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
