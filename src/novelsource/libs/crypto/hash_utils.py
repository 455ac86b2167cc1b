import hashlib


def hash_bytes(data: bytes) -> str:
    """Compute the SHA256 hash of a bytes object.

    Args:
        data: The bytes to hash.

    Returns:
        SHA256 hash of the data as a lowercase hexadecimal string.
    """
    return hashlib.sha256(data).hexdigest()


def hash_text(text: str, encoding: str = "utf-8") -> str:
    """Compute the SHA256 hash of a string.

    Args:
        text: The text to hash.
        encoding: Encoding applied before hashing.

    Returns:
        SHA256 hash of the encoded text as a lowercase hexadecimal string.
    """
    return hash_bytes(text.encode(encoding))
