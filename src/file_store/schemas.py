"""
Document schema for stored task files.
Documents are kept with camelCase keys; Python code uses snake_case fields.
"""

import base64
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class FileRecord(BaseModel):
    """One uploaded file as stored in the files collection"""
    task_id: str = Field(..., alias="taskId", description="Task identifier grouping the upload")
    filename: str = Field(..., description="Original client-supplied file name")
    mimetype: str = Field("application/octet-stream", description="MIME type reported by the client")
    size: int = Field(0, ge=0, description="Payload size in bytes")
    data: bytes = Field(b"", description="Raw file payload")
    blob_key: Optional[str] = Field(
        None,
        alias="blobKey",
        description="S3 object key when the payload is stored outside the document",
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "taskId": "T1",
                "filename": "a.txt",
                "mimetype": "text/plain",
                "size": 5,
                "data": "aGVsbG8=",
            }
        },
    )

    @field_validator("data", mode="before")
    @classmethod
    def coerce_binary(cls, v: Any) -> Any:
        # bson.Binary subclasses bytes
        if isinstance(v, (bytes, bytearray, memoryview)) and type(v) is not bytes:
            return bytes(v)
        if v is None:
            return b""
        return v

    @field_serializer("data", when_used="json")
    def serialize_data(self, data: bytes) -> str:
        return base64.b64encode(data).decode("ascii")

    def to_document(self) -> Dict[str, Any]:
        """Build the MongoDB document for this record"""
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "FileRecord":
        """Build a record from a MongoDB document, ignoring `_id`"""
        document = {k: v for k, v in document.items() if k != "_id"}
        return cls.model_validate(document)
