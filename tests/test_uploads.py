import pytest

from pharmacart.domain.errors import FileTooLarge, InvalidFileType
from pharmacart.utils.uploads import UploadedFile, detect_image_type, validate_image


@pytest.mark.parametrize(
    "content, expected",
    [
        (b"\xff\xd8\xff\xe0rest", "image/jpeg"),
        (b"\x89PNG\r\n\x1a\nrest", "image/png"),
        (b"GIF89a rest", "image/gif"),
        (b"RIFF\x00\x00\x00\x00WEBPVP8 ", "image/webp"),
        (b"RIFF\x00\x00\x00\x00WAVEfmt ", None),
        (b"%PDF-1.7", None),
    ],
)
def test_detect_image_type(content, expected):
    assert detect_image_type(content) == expected


def test_declared_type_must_be_image():
    upload = UploadedFile("a.png", "application/octet-stream", b"\x89PNG\r\n\x1a\n")
    with pytest.raises(InvalidFileType) as exc:
        validate_image(upload, "passportImage")
    assert exc.value.details["field"] == "passportImage"


def test_size_limit():
    upload = UploadedFile("a.png", "image/png", b"\x89PNG\r\n\x1a\n" + b"\x00" * 100)
    with pytest.raises(FileTooLarge):
        validate_image(upload, "passportImage", max_bytes=64)
    assert validate_image(upload, "passportImage", max_bytes=1024) == "image/png"
