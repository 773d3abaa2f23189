"""
Store wrapper that keeps payload bytes in S3 and only a reference in the
document store. Records read back through it carry their payload again, so
callers see the same FileRecord contract as with inline storage.
"""

import logging
import uuid
from typing import List, Optional, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .base import FileStore
from .errors import FileStoreError
from .s3.delete_objects import delete_s3_objects
from .s3.read_objects import fetch_s3_object_bytes
from .s3.write_objects import upload_s3_object
from .schemas import FileRecord

logger = logging.getLogger(__name__)


class BlobOffloadingStore(FileStore):
    """Offloads FileRecord payloads to an S3 bucket"""

    def __init__(self, inner: FileStore, bucket_name: str, s3_client=None):
        self.inner = inner
        self.bucket_name = bucket_name
        self.s3_client = s3_client

    @staticmethod
    def _object_key(record: FileRecord) -> str:
        return f"{record.task_id}/{uuid.uuid4().hex}/{record.filename}"

    def insert_all(self, records: Sequence[FileRecord]) -> int:
        references: List[FileRecord] = []
        try:
            for record in records:
                object_key = self._object_key(record)
                upload_s3_object(
                    bucket_name=self.bucket_name,
                    object_key=object_key,
                    file_content=record.data,
                    content_type=record.mimetype,
                    s3_client=self.s3_client,
                )
                references.append(record.model_copy(update={"data": b"", "blob_key": object_key}))
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error uploading payloads to bucket {self.bucket_name}: {e}")
            self._discard([r.blob_key for r in references])
            raise FileStoreError(f"Error uploading payloads: {e}") from e

        logger.info(f"Uploaded {len(references)} payload(s) to bucket {self.bucket_name}")
        try:
            inserted = self.inner.insert_all(references)
        except FileStoreError:
            self._discard([r.blob_key for r in references])
            raise

        if inserted < len(references):
            self._discard_unreferenced(references)
        return inserted

    def _discard_unreferenced(self, references: Sequence[FileRecord]) -> None:
        # records skipped by the inner store leave payloads nothing points to
        stored_keys = set()
        try:
            for task_id in {r.task_id for r in references}:
                stored_keys.update(r.blob_key for r in self.inner.find_by_task(task_id))
        except FileStoreError as e:
            logger.error(f"Could not list stored payloads, leaving skipped uploads in place: {e}")
            return
        self._discard([r.blob_key for r in references if r.blob_key not in stored_keys])

    def _discard(self, object_keys: List[str]) -> None:
        if not object_keys:
            return
        try:
            delete_s3_objects(
                bucket_name=self.bucket_name,
                object_keys=object_keys,
                s3_client=self.s3_client,
            )
            logger.info(f"Removed {len(object_keys)} orphaned payload(s) from bucket {self.bucket_name}")
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error removing orphaned payloads {object_keys}: {e}")

    def find_by_task(self, task_id: str) -> List[FileRecord]:
        records = self.inner.find_by_task(task_id)
        try:
            return [self._with_payload(record) for record in records]
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error fetching payloads for task {task_id}: {e}")
            raise FileStoreError(f"Error fetching payloads: {e}") from e

    def _with_payload(self, record: FileRecord) -> FileRecord:
        if not record.blob_key:
            return record
        data = fetch_s3_object_bytes(
            bucket_name=self.bucket_name,
            object_key=record.blob_key,
            s3_client=self.s3_client,
        )
        return record.model_copy(update={"data": data})

    def ping(self) -> bool:
        return self.inner.ping()

    def close(self) -> None:
        self.inner.close()


def build_s3_client(region_name: str, endpoint_url: Optional[str] = None):
    """Create the boto3 S3 client used for payload offloading"""
    return boto3.client("s3", region_name=region_name, endpoint_url=endpoint_url)
