from pydantic import BaseModel
from typing import Optional

class ShortLinkResponse(BaseModel):
    status: int
    message: str
    url: Optional[str] = None
    code: Optional[str] = None
    encoded: Optional[str] = None

class ErrorResponse(BaseModel):
    status: int
    message: str
    code: Optional[str] = None
