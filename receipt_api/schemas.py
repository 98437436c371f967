from pydantic import BaseModel, Field


class ReceiptMetadata(BaseModel):
    original_filename: str | None = Field(default=None, serialization_alias="originalFilename")
    file_size: int = Field(serialization_alias="fileSize")
    mime_type: str = Field(serialization_alias="mimeType")
    processed_at: str = Field(serialization_alias="processedAt")  # ISO-8601 UTC


class ProcessReceiptOut(BaseModel):
    success: bool = True
    data: dict
    metadata: ReceiptMetadata


class ErrorOut(BaseModel):
    error: str
    message: str
    details: str | None = None
