"""
Image Colors Fingerprinting Utilities
Content hashing for uploads so identical images share a cache entry.
"""
import hashlib


def compute_sha256(image_bytes: bytes) -> str:
    """
    Compute SHA-256 hash of raw image bytes.

    Args:
        image_bytes: Raw image bytes

    Returns:
        SHA-256 hash as hex string
    """
    return hashlib.sha256(image_bytes).hexdigest()


def content_locator(image_bytes: bytes) -> str:
    """Stable locator for uploaded content, used in place of a URI."""
    return f"sha256:{compute_sha256(image_bytes)}"
