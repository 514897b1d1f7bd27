"""Scripted bot personas and their reply pools."""

from __future__ import annotations

from chatsim.schemas.chat import Persona

PERSONAS: dict[str, Persona] = {
    persona.id: persona
    for persona in (
        Persona(
            id="helper",
            display_name="Helper",
            avatar_ref="https://i.pravatar.cc/48?img=32",
            description="Friendly helper bot",
            reply_pool=(
                "Hi! How can I help you today?",
                "Sure, try breaking the task into smaller steps.",
                "You can also search online docs for quick examples.",
                "I suggest starting with a simple prototype first.",
                "If you need, I can give a short checklist.",
            ),
        ),
        Persona(
            id="funny",
            display_name="Funny",
            avatar_ref="https://i.pravatar.cc/48?img=56",
            description="Makes jokes",
            reply_pool=(
                "Why did the developer go broke? Because he used up all his cache.",
                "I told a UDP joke, you might not get it.",
                "I tried to catch some fog earlier. Mist!",
                "I would tell you a joke about UDP, but I'm not sure you'd get the response.",
            ),
        ),
        Persona(
            id="info",
            display_name="Info",
            avatar_ref="https://i.pravatar.cc/48?img=14",
            description="Gives facts",
            reply_pool=(
                "JS was created in 10 days.",
                "Pro tip: comment your code for future you.",
                "Fun fact: the first computer bug was a real moth.",
            ),
        ),
    )
}


def get_persona(persona_id: str | None) -> Persona | None:
    """Look up a persona, returning ``None`` for unknown ids."""
    if persona_id is None:
        return None
    return PERSONAS.get(persona_id)
