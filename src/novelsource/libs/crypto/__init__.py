__all__ = ["hash_bytes", "hash_text"]

from .hash_utils import hash_bytes, hash_text
