# artmarket/core/errors.py
"""
Error taxonomy shared by services, guards and routers.

Every kind is an HTTPException so services can raise it directly and
FastAPI renders it as {"detail": ...} with the matching status code.
"""

from fastapi import HTTPException, status


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InvalidArgument(HTTPException):
    def __init__(self, detail: str | dict = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InvalidState(HTTPException):
    def __init__(self, detail: str = "Invalid state for this action"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class CapacityExceeded(HTTPException):
    """
    Requested quantity is above the product's available stock.

    Both bounds are reported so the client can correct the request.
    """

    def __init__(self, available_quantity: int, requested_quantity: int):
        self.available_quantity = available_quantity
        self.requested_quantity = requested_quantity
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": "Not enough quantity available",
                "available_quantity": available_quantity,
                "requested_quantity": requested_quantity,
            },
        )


class Internal(HTTPException):
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        )
