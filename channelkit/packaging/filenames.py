"""
File naming for export packages.
"""

import re

MAX_FILENAME_LENGTH = 50
DEFAULT_IMAGE_EXTENSION = "jpg"

_UNSAFE_RE = re.compile(r"[^A-Za-z0-9]")
_REPEAT_RE = re.compile(r"_+")
_EXTENSION_RE = re.compile(r"\.(jpg|jpeg|png|gif|webp|bmp)(\?|#|$)", re.IGNORECASE)


def sanitize_filename(name: str) -> str:
    """
    Make a string safe as a file name stem.

    Non-alphanumerics become ``_``, runs of ``_`` collapse, the result is
    capped at 50 characters and lowercased. Idempotent.
    """
    cleaned = _REPEAT_RE.sub("_", _UNSAFE_RE.sub("_", name or ""))
    return cleaned[:MAX_FILENAME_LENGTH].lower()


def image_extension(url: str) -> str:
    """Extension sniffed from an image URL; ``jpg`` when unrecognized."""
    match = _EXTENSION_RE.search(url or "")
    return match.group(1).lower() if match else DEFAULT_IMAGE_EXTENSION


def image_archive_name(position: int, extension: str) -> str:
    return f"images/image_{position}.{extension}"
