"""
Document store gateway for uploaded task files.

Exposes the FileRecord document type and the stores that persist it: a
MongoDB-backed store and a wrapper that offloads payload bytes to S3.
"""

from .base import FileStore
from .errors import FileStoreError
from .schemas import FileRecord
from .mongo_adapter import MongoFileStore
from .blob_offload import BlobOffloadingStore

__all__ = [
    'FileStore', 'FileStoreError', 'FileRecord',
    'MongoFileStore', 'BlobOffloadingStore'
]
