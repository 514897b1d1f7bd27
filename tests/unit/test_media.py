from __future__ import annotations

import pytest
from litestar.datastructures import UploadFile

from chatsim.lib.exceptions import InvalidDraft
from chatsim.lib.media import read_image_upload, to_data_url


def test_to_data_url() -> None:
    assert to_data_url(b"abc", "image/png") == "data:image/png;base64,YWJj"


async def test_read_image_upload() -> None:
    upload = UploadFile(content_type="image/gif", filename="dot.gif", file_data=b"GIF89a")

    data_url, size = await read_image_upload(upload)

    assert data_url == "data:image/gif;base64,R0lGODlh"
    assert size == 6


async def test_non_image_upload_is_rejected() -> None:
    upload = UploadFile(content_type="text/plain", filename="notes.txt", file_data=b"hello")

    with pytest.raises(InvalidDraft):
        await read_image_upload(upload)


async def test_empty_image_upload_is_rejected() -> None:
    upload = UploadFile(content_type="image/png", filename="empty.png", file_data=b"")

    with pytest.raises(InvalidDraft):
        await read_image_upload(upload)
