"""Projection of the conversation log into render instructions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chatsim.schemas import MessageKind, RenderInstruction, Sender, Side

if TYPE_CHECKING:
    from collections.abc import Iterable

    from chatsim.schemas import ChatMessage, Persona

DEFAULT_USER_AVATAR = "https://i.pravatar.cc/48?img=3"


def render_message(
    index: int,
    message: ChatMessage,
    persona: Persona,
    user_avatar: str = DEFAULT_USER_AVATAR,
) -> RenderInstruction:
    """Describe how a single message is displayed."""
    is_user = message.sender is Sender.USER
    fallback_avatar = user_avatar if is_user else persona.avatar_ref
    is_image = message.kind is MessageKind.IMAGE
    return RenderInstruction(
        index=index,
        message_id=message.id,
        side=Side.RIGHT if is_user else Side.LEFT,
        avatar_ref=message.avatar_ref or fallback_avatar,
        kind=message.kind,
        timestamp=message.created_at,
        reactions=tuple(message.reactions),
        text=None if is_image else message.text,
        image_ref=message.image_data if is_image else None,
    )


def project(
    messages: Iterable[ChatMessage],
    persona: Persona,
    user_avatar: str = DEFAULT_USER_AVATAR,
) -> list[RenderInstruction]:
    """Re-derive the full render sequence from the current log.

    The output has one instruction per message, in log order, and depends
    only on the arguments.
    """
    return [render_message(index, message, persona, user_avatar) for index, message in enumerate(messages)]
