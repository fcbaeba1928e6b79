from codedpad.storage.blob_store import (
    BlobBackend, LocalBlobBackend, BlobStore, BlobRef, get_blob_store
)

__all__ = [
    "BlobBackend", "LocalBlobBackend", "BlobStore", "BlobRef", "get_blob_store"
]
