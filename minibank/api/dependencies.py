"""
Shared API dependencies and error translation
"""

from fastapi import HTTPException, Request, status

from ..errors import (
    AccountInactive, BankingError, InsufficientFunds, InvalidInput, NotFound,
    StorageIOError
)
from ..system import BankingSystem


ERROR_STATUS = {
    InvalidInput: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotFound: status.HTTP_404_NOT_FOUND,
    AccountInactive: status.HTTP_409_CONFLICT,
    InsufficientFunds: status.HTTP_409_CONFLICT,
    StorageIOError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_banking_system(request: Request) -> BankingSystem:
    return request.app.state.banking_system


def http_error(error: BankingError) -> HTTPException:
    """Map a banking error to the HTTP response the client sees"""
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
