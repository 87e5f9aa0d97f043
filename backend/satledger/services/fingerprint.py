import hashlib


def content_fingerprint(data: bytes) -> str:
    """SHA-256 hex digest of a raw source file, used as its deduplication key."""
    return hashlib.sha256(data).hexdigest()
