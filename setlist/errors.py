# setlist/errors.py
from fastapi import HTTPException


class TrackValidationError(HTTPException):
    """Missing/blank track field, bad type, or mismatched ids."""

    def __init__(self, message: str):
        super().__init__(status_code=400, detail=message)


class NotFoundError(HTTPException):
    def __init__(self, message: str = "Not Found"):
        super().__init__(status_code=404, detail=message)


INTERNAL_ERROR_MESSAGE = "Internal Server Error"
