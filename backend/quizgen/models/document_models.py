from pydantic import BaseModel
from typing import Optional


class UploadedDocument(BaseModel):
    filename: Optional[str] = None
    content: bytes


class ExtractedText(BaseModel):
    text: str

    @property
    def length(self) -> int:
        return len(self.text)


class UploadResponse(BaseModel):
    text: str


class ErrorResponse(BaseModel):
    error: str
