from __future__ import annotations

import pytest

from chatsim.lib.personas import PERSONAS
from chatsim.schemas import ChatMessage, MessageKind, Sender, Side
from chatsim.services.view import project, render_message

USER_AVATAR = "https://example.test/me.png"


@pytest.fixture
def messages() -> list[ChatMessage]:
    return [
        ChatMessage(
            id="m_1_1",
            sender=Sender.BOT,
            kind=MessageKind.TEXT,
            text="Welcome",
            created_at="09:00",
            avatar_ref="https://example.test/bot.png",
        ),
        ChatMessage(
            id="m_2_2",
            sender=Sender.USER,
            kind=MessageKind.TEXT,
            text="hi",
            created_at="09:01",
            avatar_ref="",
            reactions=["👍"],
        ),
        ChatMessage(
            id="m_3_3",
            sender=Sender.USER,
            kind=MessageKind.IMAGE,
            image_data="data:image/png;base64,AAAA",
            created_at="09:02",
            avatar_ref=USER_AVATAR,
        ),
        ChatMessage(id="m_4_4", sender=Sender.BOT, kind=MessageKind.TEXT, text="ok", created_at="09:03", avatar_ref=""),
    ]


def test_one_instruction_per_message_in_order(messages: list[ChatMessage]) -> None:
    rendered = project(messages, PERSONAS["helper"], USER_AVATAR)

    assert [r.message_id for r in rendered] == [m.id for m in messages]
    assert [r.index for r in rendered] == [0, 1, 2, 3]


def test_sides_follow_sender(messages: list[ChatMessage]) -> None:
    rendered = project(messages, PERSONAS["helper"], USER_AVATAR)

    assert [r.side for r in rendered] == [Side.LEFT, Side.RIGHT, Side.RIGHT, Side.LEFT]


def test_missing_avatar_falls_back(messages: list[ChatMessage]) -> None:
    rendered = project(messages, PERSONAS["info"], USER_AVATAR)

    assert rendered[0].avatar_ref == "https://example.test/bot.png"
    assert rendered[1].avatar_ref == USER_AVATAR
    assert rendered[3].avatar_ref == PERSONAS["info"].avatar_ref


def test_image_message_renders_image_only(messages: list[ChatMessage]) -> None:
    rendered = render_message(2, messages[2], PERSONAS["helper"], USER_AVATAR)

    assert rendered.kind is MessageKind.IMAGE
    assert rendered.image_ref == "data:image/png;base64,AAAA"
    assert rendered.text is None


def test_reactions_and_timestamp_are_carried(messages: list[ChatMessage]) -> None:
    rendered = render_message(1, messages[1], PERSONAS["helper"], USER_AVATAR)

    assert rendered.reactions == ("👍",)
    assert rendered.timestamp == "09:01"
    assert rendered.text == "hi"


def test_projection_is_pure(messages: list[ChatMessage]) -> None:
    first = project(messages, PERSONAS["funny"], USER_AVATAR)
    second = project(messages, PERSONAS["funny"], USER_AVATAR)

    assert first == second
    assert messages[1].reactions == ["👍"]


def test_empty_log_renders_nothing() -> None:
    assert project([], PERSONAS["helper"]) == []
