"""Functions for deleting payload objects from an S3 bucket."""

from typing import TYPE_CHECKING, Optional, Sequence

import boto3

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client


def delete_s3_objects(
    bucket_name: str,
    object_keys: Sequence[str],
    s3_client: Optional["S3Client"] = None,
) -> None:
    """
    Delete objects from an S3 bucket in one request.

    :param bucket_name: The name of the S3 bucket.
    :param object_keys: paths to the objects in the S3 bucket.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.
    """
    if not object_keys:
        return
    s3_client = s3_client or boto3.client("s3")
    s3_client.delete_objects(
        Bucket=bucket_name,
        Delete={"Objects": [{"Key": key} for key in object_keys], "Quiet": True},
    )
