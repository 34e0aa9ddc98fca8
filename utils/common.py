# utils/common.py
"""Common utilities: upload validation, id checks and path management"""
import os
import random
import re
import time
from pathlib import Path
from typing import Iterable, Optional

from core.errors import ValidationError

# Do not import settings here: config.py imports this module.

_IMAGE_SIGNATURES = {
    "jpg": (b"\xff\xd8\xff",),
    "jpeg": (b"\xff\xd8\xff",),
    "png": (b"\x89PNG\r\n\x1a\n",),
}

_UUID_PATTERN = re.compile(
    r"^[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}$", re.IGNORECASE
)


# ============= Path Management =============

def get_project_root() -> str:
    """Returns the absolute path to the project's root directory."""
    return os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def get_log_file_path() -> str:
    """Returns the default log file path (directory is created by setup_logging)."""
    return os.path.join(get_project_root(), "log", "bitai.log")


# ============= Upload Validation =============

def get_file_extension(filename: str) -> str:
    """Extracts and normalizes the file extension from a filename."""
    return Path(filename).suffix[1:].lower()


def validate_image_upload(
    filename: Optional[str],
    content_type: Optional[str],
    allowed_extensions: Iterable[str],
) -> str:
    """
    Check a slip upload's extension and MIME type against the allow-list.

    Both must match, e.g. ``receipt.PNG`` sent as ``image/png``.
    Returns the normalized extension.
    """
    allowed = [ext.lower() for ext in allowed_extensions]
    message = f"Only images ({', '.join(allowed)}) are allowed"

    extension = get_file_extension(filename or "")
    if extension not in allowed:
        raise ValidationError(message, detail=f"extension '{extension}' rejected")

    subtype = (content_type or "").lower().split(";")[0].strip()
    if not subtype.startswith("image/") or subtype[len("image/"):] not in allowed:
        raise ValidationError(message, detail=f"content type '{content_type}' rejected")

    return extension


def validate_image_signature(content: bytes, extension: str) -> None:
    """Validates that file content matches its extension using magic number verification."""
    signatures = _IMAGE_SIGNATURES.get(extension.lower(), ())
    if not any(content.startswith(sig) for sig in signatures):
        raise ValidationError(
            f"Invalid {extension.upper()} file",
            detail="file signature does not match its extension",
        )


def generate_slip_filename(extension: str) -> str:
    """slip-<epoch ms>-<random>.<ext>"""
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"slip-{unique_suffix}.{extension.lower()}"


# ============= Identifiers =============

def validate_document_id(doc_id: str) -> bool:
    """Validate document ID format."""
    return bool(_UUID_PATTERN.match(doc_id))
