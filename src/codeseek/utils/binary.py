"""Binary file detection utilities."""

from pathlib import Path

BINARY_PROBE_BYTES = 4096


def is_binary_content(content: bytes, sample_size: int = BINARY_PROBE_BYTES) -> bool:
    """Detect binary content by looking for a null byte near the start.

    Args:
        content: Raw file content
        sample_size: Number of bytes to sample from the start

    Returns:
        True if content appears to be binary
    """
    return b"\x00" in content[:sample_size]


def read_text_file(path: str | Path) -> str | None:
    """Read a file as UTF-8 text.

    Returns:
        The decoded text, or None if the file is unreadable or binary
    """
    try:
        raw_content = Path(path).read_bytes()
    except OSError:
        return None

    if is_binary_content(raw_content):
        return None

    return raw_content.decode("utf-8", errors="replace")
