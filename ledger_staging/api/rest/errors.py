from fastapi import HTTPException

from ledger_staging.core.exceptions import (
    StagingError,
    ValidationError,
    NotFoundError,
    StorageError,
    UpstreamError,
)

STATUS_CODES = {
    ValidationError: 400,
    NotFoundError: 404,
    StorageError: 500,
    UpstreamError: 502,
}


def http_error(err: StagingError) -> HTTPException:
    """Map a staging error to an HTTPException carrying its code and details"""
    status_code = next(
        (code for kind, code in STATUS_CODES.items() if isinstance(err, kind)),
        500,
    )
    return HTTPException(status_code=status_code, detail=err.to_dict())
