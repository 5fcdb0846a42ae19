"""Blob cache stores for serialized replay documents."""

from .blob_store import BlobNotFoundError, BlobStore, FileBlobStore
from .sql_blob_store import SqlBlobStore

__all__ = [
    "BlobNotFoundError",
    "BlobStore",
    "FileBlobStore",
    "SqlBlobStore",
]
