"""Error payload shared by the API endpoints."""

from typing import Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every non-2xx response produced by the error middleware."""

    error: str
    detail: str = ""
    skill: Optional[str] = None  # set for unknown skill names
    line: Optional[int] = None  # set for front-matter errors that know the line
