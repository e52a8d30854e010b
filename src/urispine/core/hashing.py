"""
Deterministic hashing for term URI uniqueness.

Term URIs can be far longer than the indexable key length of some relational
backends (MySQL caps utf8 index prefixes well below a 2000-character URI), so
uniqueness is enforced on a fixed-length SHA-256 hex digest of the URI
instead of the URI itself.

Examples:
    >>> len(uri_hash("http://id.example.org/term/1"))
    64
    >>> uri_hash("http://id.example.org/term/1") == uri_hash("http://id.example.org/term/1")
    True

Tags:
    hashing, uniqueness, uri, uri-spine
"""

import hashlib

URI_HASH_LENGTH = 64


def compute_hash(*values: object, length: int = URI_HASH_LENGTH) -> str:
    """
    Compute deterministic hash from values.

    Values are joined with ``|`` before hashing, so ``("a", "b")`` and
    ``("b", "a")`` hash differently.

    Args:
        *values: Values to hash (converted to strings)
        length: Hex digest length (default 64 = full SHA-256)

    Returns:
        Hex string of specified length
    """
    content = "|".join(str(v) for v in values)
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:length]


def uri_hash(uri: str) -> str:
    """Full SHA-256 hex digest of *uri*, stored in ``terms.uri_hash``."""
    return compute_hash(uri)
