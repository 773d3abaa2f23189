"""Errors raised by document store gateways."""


class FileStoreError(Exception):
    """A read or write against the backing store failed."""
