from fastapi import Request, HTTPException, status
from fastapi.responses import JSONResponse
from typing import Any, Callable


class APIException(Exception):
    """ Base class for all exceptions in the Tekno API. """
    pass


class AdminTokenRequiredException(APIException):
    """ Exception is raised when an admin endpoint is called without a token. """
    pass


class InvalidAdminTokenException(APIException):
    """ Exception is raised when the provided admin token does not match the configured one. """
    pass


class NotFoundException(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class BadRequestException(HTTPException):
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConflictException(HTTPException):
    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


def create_exception_handler(status_code: int, detail: Any) -> Callable[[Request, Exception], JSONResponse]:
    async def exception_handler(request: Request, exception: APIException):
        return JSONResponse(
            content={"detail": detail},
            status_code=status_code
        )

    return exception_handler
