from moving_count.core.types._common_types import (
    DEFAULT_HISTORY_TO_KEEP_S,
    DEFAULT_SAMPLE_INTERVAL_S,
    Count,
    DurationLike,
    Label,
    LabelCount,
    StoreBackend,
    StoreBackendName,
    TimestampLike,
    store_backend_format,
)
from moving_count.core.types._exception_types import (
    ErrorCategory,
    ErrorCode,
    ErrorDomain,
    ExceptionGroup,
)

__all__ = [
    # _common_types
    "Label",
    "Count",
    "LabelCount",
    "TimestampLike",
    "DurationLike",
    "StoreBackend",
    "StoreBackendName",
    "store_backend_format",
    "DEFAULT_SAMPLE_INTERVAL_S",
    "DEFAULT_HISTORY_TO_KEEP_S",
    # _exception_types
    "ErrorDomain",
    "ErrorCode",
    "ErrorCategory",
    "ExceptionGroup",
]
