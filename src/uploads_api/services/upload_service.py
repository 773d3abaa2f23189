"""
Upload and retrieval handlers for task files.

Both handlers are built with a ready-to-use FileStore and never manage the
connection themselves.

Deduplication is by exact filename within a task and is best-effort: the
existence check and the batch insert are separate store calls, so two
concurrent uploads of the same new filename can both insert unless the store
enforces a unique (taskId, filename) index.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from file_store import FileRecord, FileStore, FileStoreError
from uploads_api.errors import MissingParameter, NoFilesProvided, NotFound, StorageFailure
from uploads_api.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)


@dataclass
class IncomingFile:
    """One uploaded part as received from the client."""
    filename: str
    content_type: str
    size: int
    data: bytes


@dataclass
class UploadResult:
    new_files: int
    already_exists: bool = False


class UploadHandler:
    """Persists the files of an upload that are not yet stored for the task"""

    def __init__(self, store: FileStore):
        self.store = store

    @log_execution_time
    def upload(self, task_id: Optional[str], files: Sequence[IncomingFile]) -> UploadResult:
        if not task_id:
            raise MissingParameter("taskId is required")
        if not files:
            raise NoFilesProvided("No files were provided")

        try:
            existing = self.store.find_by_task(task_id)
        except FileStoreError as e:
            raise StorageFailure(f"Could not read existing files: {e}") from e

        new_files = self._new_files(files, {record.filename for record in existing})
        duplicates = len(files) - len(new_files)

        if not new_files:
            logger.info(f"Task {task_id}: all {len(files)} file(s) already exist")
            return UploadResult(new_files=0, already_exists=True)

        records = [
            FileRecord(
                task_id=task_id,
                filename=f.filename,
                mimetype=f.content_type,
                size=f.size,
                data=f.data,
            )
            for f in new_files
        ]

        try:
            inserted = self.store.insert_all(records)
        except FileStoreError as e:
            raise StorageFailure(f"Could not save files: {e}") from e

        logger.info(f"Task {task_id}: inserted {inserted} new file(s), skipped {duplicates} duplicate(s)")
        if inserted == 0:
            return UploadResult(new_files=0, already_exists=True)
        return UploadResult(new_files=inserted)

    @staticmethod
    def _new_files(files: Sequence[IncomingFile], existing_names: set) -> List[IncomingFile]:
        # names accepted earlier in the same batch count as existing
        seen = set(existing_names)
        new_files = []
        for f in files:
            if f.filename in seen:
                continue
            seen.add(f.filename)
            new_files.append(f)
        return new_files


class RetrievalHandler:
    """Returns every stored file of a task"""

    def __init__(self, store: FileStore):
        self.store = store

    @log_execution_time
    def retrieve(self, task_id: Optional[str]) -> List[FileRecord]:
        if not task_id:
            raise MissingParameter("taskId is required")

        try:
            records = self.store.find_by_task(task_id)
        except FileStoreError as e:
            raise StorageFailure(f"Could not read files: {e}") from e

        if not records:
            raise NotFound(f"No files found for taskId {task_id}")
        return records
