from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner

from chatsim.cli import chat_group

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def invoke(runner: CliRunner, tmp_path: Path):
    def _invoke(*args: str, **kwargs):
        return runner.invoke(chat_group, ["--data-dir", str(tmp_path / "store"), *args], **kwargs)

    return _invoke


def test_personas_lists_every_bot(invoke) -> None:
    result = invoke("personas")

    assert result.exit_code == 0
    for name in ("Helper", "Funny", "Info"):
        assert name in result.output


def test_history_shows_welcome(invoke) -> None:
    result = invoke("history")

    assert result.exit_code == 0
    assert "Welcome" in result.output


def test_send_waits_for_reply(invoke) -> None:
    result = invoke("send", "hello there", "--persona", "info")

    assert result.exit_code == 0, result.output
    assert "hello there" in result.output
    assert "Info" in result.output

    assert "hello there" in invoke("history").output


def test_send_blank_text(invoke) -> None:
    result = invoke("send", "   ")

    assert result.exit_code == 0
    assert "Nothing to send" in result.output


def test_react_and_delete(invoke) -> None:
    react = invoke("react", "+1")
    assert react.exit_code == 0
    assert "Reacted with +1" in react.output

    delete = invoke("delete", "0")
    assert delete.exit_code == 0
    assert "Deleted message" in delete.output


def test_delete_missing_index_fails(invoke) -> None:
    result = invoke("delete", "7")

    assert result.exit_code == 1
    assert "No message at position 7" in result.output


def test_clear_with_confirmation_declined(invoke) -> None:
    result = invoke("clear", input="n\n")

    assert result.exit_code == 0
    assert "Cancelled" in result.output


def test_clear_skips_prompt_with_yes(invoke) -> None:
    invoke("send", "soon gone", "--no-wait")

    result = invoke("clear", "--yes")

    assert result.exit_code == 0
    assert "Chat history cleared" in result.output
    assert "soon gone" not in invoke("history").output


def test_upload_rejects_non_image(invoke, tmp_path: Path) -> None:
    notes = tmp_path / "notes.txt"
    notes.write_text("hello")

    result = invoke("upload", str(notes))

    assert result.exit_code == 1
    assert "is not an image" in result.output


def test_upload_image(invoke, tmp_path: Path) -> None:
    image = tmp_path / "dot.gif"
    image.write_bytes(b"GIF89a")

    result = invoke("upload", str(image))

    assert result.exit_code == 0, result.output
    assert "data:image/gif" in result.output


def test_theme_round_trip(invoke) -> None:
    assert "light" in invoke("theme").output

    assert "dark" in invoke("theme", "dark").output
    assert "dark" in invoke("theme").output
