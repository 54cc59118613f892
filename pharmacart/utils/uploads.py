# pharmacart/utils/uploads.py
from dataclasses import dataclass
from typing import Optional

from pharmacart.domain.errors import FileTooLarge, InvalidFileType
from pharmacart.utils.settings import MAX_UPLOAD_BYTES

# magic bytes per accepted image type
IMAGE_SIGNATURES = {
    "image/jpeg": [b"\xff\xd8\xff"],
    "image/png": [b"\x89PNG\r\n\x1a\n"],
    "image/gif": [b"GIF87a", b"GIF89a"],
    "image/webp": [b"RIFF"],
}


@dataclass
class UploadedFile:
    filename: str
    content_type: str
    content: bytes


def detect_image_type(content: bytes) -> Optional[str]:
    for mime_type, signatures in IMAGE_SIGNATURES.items():
        for sig in signatures:
            if content.startswith(sig):
                if mime_type == "image/webp" and content[8:12] != b"WEBP":
                    continue
                return mime_type
    return None


def validate_image(upload: UploadedFile, field: str, max_bytes: int = MAX_UPLOAD_BYTES) -> str:
    """Return the detected MIME type or raise InvalidFileType / FileTooLarge."""
    if len(upload.content) > max_bytes:
        raise FileTooLarge(
            f"{field} exceeds {max_bytes // (1024 * 1024)}MB",
            details={"field": field, "size": len(upload.content)},
        )

    declared = (upload.content_type or "").lower()
    detected = detect_image_type(upload.content)
    if not declared.startswith("image/") or detected is None:
        raise InvalidFileType(
            f"{field} must be an image",
            details={"field": field, "content_type": upload.content_type},
        )
    return detected
