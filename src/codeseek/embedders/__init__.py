"""Vector builders for chunks and queries."""

from codeseek.embedders.hashing import HashingVectorizer, fnv1a_32

__all__ = ["HashingVectorizer", "fnv1a_32"]
