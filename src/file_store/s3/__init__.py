"""Thin wrappers over boto3 S3 calls used for payload offloading."""
