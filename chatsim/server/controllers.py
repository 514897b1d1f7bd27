"""HTTP controllers for the chat simulator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any

from litestar import Controller, delete, get, post, put
from litestar.datastructures import UploadFile
from litestar.di import Provide
from litestar.enums import RequestEncodingType
from litestar.exceptions import NotFoundException
from litestar.params import Body
from litestar.plugins.htmx import HTMXTemplate
from litestar.status_codes import HTTP_200_OK

from chatsim import schemas as s
from chatsim.lib.exceptions import UnknownPersona
from chatsim.lib.media import read_image_upload
from chatsim.lib.personas import PERSONAS
from chatsim.server import deps

if TYPE_CHECKING:
    from chatsim.services.chat import ChatService
    from chatsim.services.theme import ThemeService

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=()",
}


def _persona_cards() -> list[s.PersonaCard]:
    return [s.PersonaCard.from_persona(persona) for persona in PERSONAS.values()]


class ChatApiController(Controller):
    """JSON commands and queries for the conversation."""

    path = "/api"
    tags = ["Chat"]
    dependencies = {
        "chat_service": Provide(deps.provide_chat_service),
        "theme_service": Provide(deps.provide_theme_service),
    }

    @get(path="/chat", name="chat.view")
    async def get_chat(self, chat_service: ChatService, seen: int | None = None) -> s.ChatView:
        """Render the whole conversation.

        Pass ``seen`` (messages already rendered by the caller) to get the
        receive cue when a bot reply arrived since.
        """
        return chat_service.snapshot(cue=chat_service.receive_cue(seen))

    @post(path="/messages", name="chat.send")
    async def send_message(self, data: s.TextMessageRequest, chat_service: ChatService) -> s.ChatView:
        """Send a text message; blank text is ignored."""
        message = await chat_service.submit_text(data.text)
        return chat_service.snapshot(cue=s.SEND_CUE if message else None)

    @post(path="/images", name="chat.upload")
    async def upload_image(
        self,
        data: Annotated[UploadFile, Body(media_type=RequestEncodingType.MULTI_PART)],
        chat_service: ChatService,
    ) -> s.ChatView:
        """Send an image file."""
        payload, size_bytes = await read_image_upload(data)
        await chat_service.upload_image(payload, size_bytes)
        return chat_service.snapshot(cue=s.SEND_CUE)

    @post(path="/reactions", name="chat.react")
    async def add_reaction(self, data: s.ReactionRequest, chat_service: ChatService) -> s.ChatView:
        """React to the last message."""
        await chat_service.add_reaction_to_last(data.token)
        return chat_service.snapshot()

    @delete(path="/messages/{index:int}", name="chat.delete", status_code=HTTP_200_OK)
    async def delete_message(self, index: int, chat_service: ChatService) -> s.ChatView:
        """Delete the message at a position of the current render."""
        if await chat_service.delete_message(index) is None:
            msg = f"No message at position {index}"
            raise NotFoundException(detail=msg)
        return chat_service.snapshot()

    @delete(path="/messages", name="chat.clear", status_code=HTTP_200_OK)
    async def clear_messages(self, chat_service: ChatService) -> s.ChatView:
        """Clear the conversation history."""
        await chat_service.clear_all()
        return chat_service.snapshot()

    @get(path="/personas", name="chat.personas")
    async def list_personas(self) -> list[s.PersonaCard]:
        """List the available bots."""
        return _persona_cards()

    @put(path="/persona", name="chat.persona")
    async def select_persona(self, data: s.PersonaSelection, chat_service: ChatService) -> s.ChatView:
        """Switch the bot that answers."""
        if not chat_service.select_persona(data.persona_id):
            raise UnknownPersona(data.persona_id)
        return chat_service.snapshot()

    @get(path="/theme", name="theme.get")
    async def get_theme(self, theme_service: ThemeService) -> s.ThemePreference:
        return s.ThemePreference(theme=await theme_service.get_theme())

    @put(path="/theme", name="theme.set")
    async def set_theme(self, data: s.ThemePreference, theme_service: ThemeService) -> s.ThemePreference:
        return s.ThemePreference(theme=await theme_service.set_theme(data.theme))


class ChatPageController(Controller):
    """HTMX chat page and the partials it swaps in."""

    include_in_schema = False
    dependencies = {
        "chat_service": Provide(deps.provide_chat_service),
        "theme_service": Provide(deps.provide_theme_service),
    }

    @staticmethod
    def _messages_partial(chat_service: ChatService, cue: s.AudioCue | None = None) -> HTMXTemplate:
        context: dict[str, Any] = {"view": chat_service.snapshot(cue=cue)}
        if cue is None:
            return HTMXTemplate(template_name="partials/messages.html", context=context)
        return HTMXTemplate(
            template_name="partials/messages.html",
            context=context,
            trigger_event="chat:cue",
            params=cue.to_builtins(),
            after="settle",
        )

    @get(path="/", name="chat.show")
    async def show_chat(self, chat_service: ChatService, theme_service: ThemeService) -> HTMXTemplate:
        """Serve the chat page."""
        return HTMXTemplate(
            template_name="chat.html",
            context={
                "view": chat_service.snapshot(),
                "personas": _persona_cards(),
                "theme": (await theme_service.get_theme()).value,
            },
            headers=SECURITY_HEADERS,
        )

    @get(path="/chat/messages", name="chat.poll")
    async def poll_messages(self, chat_service: ChatService, seen: int | None = None) -> HTMXTemplate:
        """Re-render the conversation for polling."""
        return self._messages_partial(chat_service, cue=chat_service.receive_cue(seen))

    @post(path="/chat/messages", name="chat.compose", status_code=HTTP_200_OK)
    async def compose(
        self,
        data: Annotated[s.TextMessageRequest, Body(media_type=RequestEncodingType.URL_ENCODED)],
        chat_service: ChatService,
    ) -> HTMXTemplate:
        """Handle the composer form."""
        message = await chat_service.submit_text(data.text)
        return self._messages_partial(chat_service, cue=s.SEND_CUE if message else None)

    @post(path="/chat/images", name="chat.attach", status_code=HTTP_200_OK)
    async def attach_image(
        self,
        data: Annotated[UploadFile, Body(media_type=RequestEncodingType.MULTI_PART)],
        chat_service: ChatService,
    ) -> HTMXTemplate:
        """Handle the image picker form."""
        payload, size_bytes = await read_image_upload(data)
        await chat_service.upload_image(payload, size_bytes)
        return self._messages_partial(chat_service, cue=s.SEND_CUE)

    @post(path="/chat/reactions", name="chat.quick_reaction", status_code=HTTP_200_OK)
    async def quick_reaction(
        self,
        data: Annotated[s.ReactionRequest, Body(media_type=RequestEncodingType.URL_ENCODED)],
        chat_service: ChatService,
    ) -> HTMXTemplate:
        await chat_service.add_reaction_to_last(data.token)
        return self._messages_partial(chat_service)

    @post(path="/chat/messages/{index:int}/delete", name="chat.remove", status_code=HTTP_200_OK)
    async def remove_message(self, index: int, chat_service: ChatService) -> HTMXTemplate:
        await chat_service.delete_message(index)
        return self._messages_partial(chat_service)

    @post(path="/chat/clear", name="chat.reset", status_code=HTTP_200_OK)
    async def reset(self, chat_service: ChatService) -> HTMXTemplate:
        await chat_service.clear_all()
        return self._messages_partial(chat_service)

    @post(path="/chat/persona", name="chat.pick_persona", status_code=HTTP_200_OK)
    async def pick_persona(
        self,
        data: Annotated[s.PersonaSelection, Body(media_type=RequestEncodingType.URL_ENCODED)],
        chat_service: ChatService,
    ) -> HTMXTemplate:
        """Switch bots from the picker; unknown ids leave the selection as it was."""
        chat_service.select_persona(data.persona_id)
        return self._messages_partial(chat_service)

    @post(path="/chat/theme", name="chat.toggle_theme", status_code=HTTP_200_OK)
    async def toggle_theme(
        self,
        data: Annotated[s.ThemePreference, Body(media_type=RequestEncodingType.URL_ENCODED)],
        theme_service: ThemeService,
    ) -> HTMXTemplate:
        theme = await theme_service.set_theme(data.theme)
        return HTMXTemplate(
            template_name="partials/theme.html",
            context={"theme": theme.value},
            trigger_event="chat:theme",
            params={"theme": theme.value},
            after="settle",
        )
