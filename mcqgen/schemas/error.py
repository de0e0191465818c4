from typing import List, Optional

from pydantic import BaseModel


class FieldError(BaseModel):
    field: str
    message: str
    type: Optional[str] = None


class ErrorResponse(BaseModel):
    code: str
    message: str
    trace_id: str | None = None
    errors: Optional[List[FieldError]] = None
