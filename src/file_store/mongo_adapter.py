"""
MongoDB store for uploaded task files.
Keeps every FileRecord in a single collection, queried by `taskId`.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from pymongo import ASCENDING, MongoClient
from pymongo.errors import BulkWriteError, ConnectionFailure, PyMongoError
from pymongo.server_api import ServerApi

from .base import FileStore
from .errors import FileStoreError
from .schemas import FileRecord

logger = logging.getLogger(__name__)

DUPLICATE_KEY_ERROR = 11000


class MongoFileStore(FileStore):
    """MongoDB adapter for FileRecord documents"""

    def __init__(
        self,
        connection_string: str,
        database_name: str,
        collection_name: str = "files",
        enforce_unique_filenames: bool = False,
        client: Optional[MongoClient] = None,
    ):
        self.connection_string = connection_string
        self.database_name = database_name
        self.collection_name = collection_name
        self.enforce_unique_filenames = enforce_unique_filenames
        self.client = client
        self.db = client[database_name] if client is not None else None

    @property
    def collection(self):
        if self.db is None:
            raise FileStoreError("MongoDB store is not connected")
        return self.db[self.collection_name]

    def connect(self) -> None:
        """Establish MongoDB connection and verify it with a ping"""
        try:
            if self.client is None:
                self.client = MongoClient(
                    self.connection_string,
                    server_api=ServerApi("1", strict=True, deprecation_errors=True),
                )
            self.db = self.client[self.database_name]

            self.client.admin.command("ping")
            logger.info(f"Connected to MongoDB database: {self.database_name}")

        except ConnectionFailure as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise FileStoreError(f"Failed to connect to MongoDB: {e}") from e
        except PyMongoError as e:
            logger.error(f"MongoDB connection error: {e}")
            raise FileStoreError(f"MongoDB connection error: {e}") from e

    def init_indexes(self) -> None:
        """Create the indexes used by task lookups"""
        try:
            self.collection.create_index([("taskId", ASCENDING)])
            if self.enforce_unique_filenames:
                self.collection.create_index(
                    [("taskId", ASCENDING), ("filename", ASCENDING)],
                    unique=True,
                )
            logger.info(
                f"Indexes ready on {self.collection_name} "
                f"(unique filenames: {self.enforce_unique_filenames})"
            )
        except PyMongoError as e:
            logger.error(f"Error creating indexes on {self.collection_name}: {e}")
            raise FileStoreError(f"Error creating indexes: {e}") from e

    def find_by_task(self, task_id: str) -> List[FileRecord]:
        """Get all records stored for a task"""
        try:
            documents = list(self.collection.find({"taskId": task_id}))
        except PyMongoError as e:
            logger.error(f"Error querying {self.collection_name} for task {task_id}: {e}")
            raise FileStoreError(f"Error querying files: {e}") from e

        return [FileRecord.from_document(doc) for doc in documents]

    def insert_all(self, records: Sequence[FileRecord]) -> int:
        """Insert records in one `insert_many` call"""
        if not records:
            return 0

        documents = [record.to_document() for record in records]
        try:
            result = self.collection.insert_many(documents, ordered=False)
            inserted = len(result.inserted_ids)

        except BulkWriteError as e:
            inserted = self._inserted_despite_duplicates(e)

        except PyMongoError as e:
            logger.error(f"Error inserting into {self.collection_name}: {e}")
            raise FileStoreError(f"Error inserting files: {e}") from e

        logger.info(f"Inserted {inserted} document(s) into {self.collection_name}")
        return inserted

    def _inserted_despite_duplicates(self, error: BulkWriteError) -> int:
        details: Dict[str, Any] = error.details or {}
        write_errors = details.get("writeErrors", [])
        only_duplicates = bool(write_errors) and all(
            err.get("code") == DUPLICATE_KEY_ERROR for err in write_errors
        )
        if not (self.enforce_unique_filenames and only_duplicates):
            logger.error(f"Bulk insert into {self.collection_name} failed: {details}")
            raise FileStoreError(f"Error inserting files: {error}") from error

        logger.warning(
            f"Skipped {len(write_errors)} file(s) already stored by a concurrent upload"
        )
        return details.get("nInserted", 0)

    def ping(self) -> bool:
        if self.client is None:
            return False
        try:
            self.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB connection closed")
        self.client = None
        self.db = None
