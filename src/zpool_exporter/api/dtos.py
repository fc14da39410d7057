from typing import Optional

from pydantic import BaseModel


class BaseResponse(BaseModel):
    status: str = "success"
    message: Optional[str] = None


class SuccessResponse(BaseResponse):
    pass


class ErrorResponse(BaseResponse):
    status: str = "error"


class VersionResponse(BaseResponse):
    version: str
