from fastapi import Request

from file_store import FileStore
from uploads_api.services import RetrievalHandler, UploadHandler


def get_store(request: Request) -> FileStore:
    """Store dependency."""
    return request.app.state.store


def get_upload_handler(request: Request) -> UploadHandler:
    return request.app.state.upload_handler


def get_retrieval_handler(request: Request) -> RetrievalHandler:
    return request.app.state.retrieval_handler
