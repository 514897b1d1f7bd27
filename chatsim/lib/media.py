"""Conversion of uploaded files into inline image payloads."""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING

from chatsim.lib.exceptions import InvalidDraft

if TYPE_CHECKING:
    from litestar.datastructures import UploadFile


def to_data_url(content: bytes, content_type: str) -> str:
    """Encode raw bytes as a base64 ``data:`` URI."""
    return f"data:{content_type};base64,{base64.b64encode(content).decode('ascii')}"


async def read_image_upload(upload: UploadFile) -> tuple[str, int]:
    """Read an uploaded image.

    Raises:
        InvalidDraft: If the file is empty or not an image.

    Returns:
        The data URI and the size of the raw file in bytes.
    """
    content_type = (upload.content_type or "").lower()
    if not content_type.startswith("image/"):
        msg = f"Only image files can be shared, got {content_type or 'unknown type'}"
        raise InvalidDraft(msg)
    content = await upload.read()
    if not content:
        msg = "Uploaded image is empty"
        raise InvalidDraft(msg)
    return to_data_url(content, content_type), len(content)
