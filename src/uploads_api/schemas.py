####################################
# --- Request/response schemas --- #
####################################

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

from file_store import FileRecord


class UploadFilesResponse(BaseModel):
    """Response model for `POST /uploadfiles` when new files were stored."""
    message: str
    new_files: int = Field(alias="newFiles", description="Number of files inserted by this upload.")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "message": "Files uploaded successfully",
                "newFiles": 2,
            }
        },
    )


class FilesExistResponse(BaseModel):
    """Response model for `POST /uploadfiles` when every file was already stored."""
    message: str
    status: Literal["exist"] = "exist"


class GetFilesResponse(BaseModel):
    """Response model for `GET /uploadfiles/:taskId`."""
    files: List[FileRecord]


class ErrorResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    components: dict
    ready: bool
