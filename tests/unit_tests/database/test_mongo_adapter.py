from unittest.mock import MagicMock

import pytest
from pymongo.errors import BulkWriteError, ConnectionFailure, OperationFailure

from file_store import FileRecord, FileStoreError, MongoFileStore

TEST_DB = "test-db"
TEST_COLLECTION = "files"


@pytest.fixture
def mongo_client():
    return MagicMock()


@pytest.fixture
def collection(mongo_client):
    return mongo_client[TEST_DB][TEST_COLLECTION]


def make_store(mongo_client, enforce_unique_filenames=False) -> MongoFileStore:
    return MongoFileStore(
        connection_string="mongodb://localhost:27017",
        database_name=TEST_DB,
        collection_name=TEST_COLLECTION,
        enforce_unique_filenames=enforce_unique_filenames,
        client=mongo_client,
    )


def record(filename: str, data: bytes = b"hello") -> FileRecord:
    return FileRecord(task_id="T1", filename=filename, mimetype="text/plain", size=len(data), data=data)


def test_connect_pings_admin(mongo_client):
    store = make_store(mongo_client)

    store.connect()

    mongo_client.admin.command.assert_called_once_with("ping")


def test_connect_failure_raises_store_error(mongo_client):
    mongo_client.admin.command.side_effect = ConnectionFailure("no servers")
    store = make_store(mongo_client)

    with pytest.raises(FileStoreError):
        store.connect()


def test_init_indexes_without_unique_constraint(mongo_client, collection):
    make_store(mongo_client).init_indexes()

    collection.create_index.assert_called_once_with([("taskId", 1)])


def test_init_indexes_with_unique_constraint(mongo_client, collection):
    make_store(mongo_client, enforce_unique_filenames=True).init_indexes()

    collection.create_index.assert_any_call([("taskId", 1), ("filename", 1)], unique=True)
    assert collection.create_index.call_count == 2


def test_find_by_task_queries_task_id_and_strips_object_id(mongo_client, collection):
    collection.find.return_value = [
        {"_id": "abc", "taskId": "T1", "filename": "a.txt", "mimetype": "text/plain", "size": 5, "data": b"hello"},
    ]

    records = make_store(mongo_client).find_by_task("T1")

    collection.find.assert_called_once_with({"taskId": "T1"})
    assert records == [record("a.txt")]


def test_find_by_task_failure_raises_store_error(mongo_client, collection):
    collection.find.side_effect = OperationFailure("not authorized")

    with pytest.raises(FileStoreError):
        make_store(mongo_client).find_by_task("T1")


def test_insert_all_writes_one_batch_with_camel_case_keys(mongo_client, collection):
    collection.insert_many.return_value = MagicMock(inserted_ids=[1, 2])

    inserted = make_store(mongo_client).insert_all([record("a.txt"), record("b.txt")])

    assert inserted == 2
    collection.insert_many.assert_called_once()
    documents = collection.insert_many.call_args.args[0]
    assert documents[0] == {
        "taskId": "T1",
        "filename": "a.txt",
        "mimetype": "text/plain",
        "size": 5,
        "data": b"hello",
    }
    assert collection.insert_many.call_args.kwargs == {"ordered": False}


def test_insert_all_with_no_records_skips_the_write(mongo_client, collection):
    assert make_store(mongo_client).insert_all([]) == 0
    collection.insert_many.assert_not_called()


def test_duplicate_key_errors_are_skipped_with_unique_index(mongo_client, collection):
    collection.insert_many.side_effect = BulkWriteError({
        "writeErrors": [{"index": 0, "code": 11000, "errmsg": "E11000 duplicate key"}],
        "nInserted": 1,
    })

    inserted = make_store(mongo_client, enforce_unique_filenames=True).insert_all(
        [record("a.txt"), record("b.txt")]
    )

    assert inserted == 1


def test_duplicate_key_errors_fail_without_unique_index(mongo_client, collection):
    collection.insert_many.side_effect = BulkWriteError({
        "writeErrors": [{"index": 0, "code": 11000, "errmsg": "E11000 duplicate key"}],
        "nInserted": 0,
    })

    with pytest.raises(FileStoreError):
        make_store(mongo_client).insert_all([record("a.txt")])


def test_other_bulk_errors_raise_store_error(mongo_client, collection):
    collection.insert_many.side_effect = BulkWriteError({
        "writeErrors": [{"index": 0, "code": 121, "errmsg": "Document failed validation"}],
        "nInserted": 0,
    })

    with pytest.raises(FileStoreError):
        make_store(mongo_client, enforce_unique_filenames=True).insert_all([record("a.txt")])


def test_ping_and_close(mongo_client):
    store = make_store(mongo_client)

    assert store.ping() is True
    store.close()

    mongo_client.close.assert_called_once()
    assert store.ping() is False


def test_unconnected_store_raises_store_error():
    store = MongoFileStore("mongodb://localhost:27017", TEST_DB)

    with pytest.raises(FileStoreError):
        store.find_by_task("T1")
