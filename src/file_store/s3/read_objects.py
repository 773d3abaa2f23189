"""Functions for reading payload objects from an S3 bucket."""

from typing import TYPE_CHECKING, Optional

import boto3

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client


def fetch_s3_object_bytes(
    bucket_name: str,
    object_key: str,
    s3_client: Optional["S3Client"] = None,
) -> bytes:
    """
    Read a whole object from an S3 bucket.

    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.
    :return: The object body.
    """
    s3_client = s3_client or boto3.client("s3")
    response = s3_client.get_object(Bucket=bucket_name, Key=object_key)
    return response["Body"].read()
