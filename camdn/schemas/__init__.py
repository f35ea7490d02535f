"""Pydantic schemas used by the HTTP layer."""
from typing import Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str


class UploadResponse(BaseModel):
    message: str = "File uploaded successfully"
    fileName: str


class ShortenRequest(BaseModel):
    url: Optional[str] = None


class ShortenResponse(BaseModel):
    url: str


class HealthResponse(BaseModel):
    status: str = "healthy"
