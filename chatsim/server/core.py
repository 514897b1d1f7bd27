"""Application core plugin."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from litestar.plugins import CLIPluginProtocol, InitPluginProtocol

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from click import Group
    from litestar import Litestar
    from litestar.config.app import AppConfig
    from litestar.stores.base import Store


logger = structlog.get_logger()


class ApplicationCore(InitPluginProtocol, CLIPluginProtocol):
    """Application core configuration plugin.

    Wires routes, templates, logging and the chat service lifespan into the
    Litestar application, and registers the ``chat`` CLI group.
    """

    __slots__ = ("app_name", "storage")
    app_name: str
    storage: Store | None

    def __init__(self, storage: Store | None = None) -> None:
        """Initialize the plugin.

        Args:
            storage: Key-value store for the conversation. Defaults to a
                file store under the configured data directory.
        """
        self.storage = storage

    def on_cli_init(self, cli: Group) -> None:
        """Configure CLI commands."""
        from chatsim.cli.commands import chat_group
        from chatsim.lib.settings import get_settings

        settings = get_settings()
        self.app_name = settings.app.NAME
        cli.add_command(chat_group)

    @asynccontextmanager
    async def server_lifespan(self, app: Litestar) -> AsyncGenerator[None, None]:
        """Start the chat service and stop its pending replies on shutdown.

        Args:
            app: The Litestar application instance.

        Yields:
            None during application runtime.
        """
        from chatsim.server.deps import build_chat_service

        service = await build_chat_service(self.storage)
        app.state.chat_service = service
        app.state.chat_storage = service.store.storage
        logger.info("Chat service ready", messages=len(service.log), durable=service.store.durable)

        try:
            yield
        finally:
            logger.info("Stopping chat responder...")
            await app.state.chat_service.responder.aclose()

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Configure application routes, templates and plugins.

        Args:
            app_config: The AppConfig instance.

        Returns:
            The configured app config.
        """

        from litestar.contrib.jinja import JinjaTemplateEngine
        from litestar.datastructures import UploadFile
        from litestar.enums import RequestEncodingType
        from litestar.openapi import OpenAPIConfig
        from litestar.openapi.plugins import ScalarRenderPlugin
        from litestar.params import Body
        from litestar.plugins.htmx import HTMXRequest
        from litestar.template.config import TemplateConfig

        from chatsim import config
        from chatsim import schemas as s
        from chatsim.lib.log import StructlogMiddleware, after_exception_hook_handler
        from chatsim.lib.settings import get_settings
        from chatsim.server import plugins
        from chatsim.server.controllers import ChatApiController, ChatPageController
        from chatsim.server.exceptions import exception_handlers
        from chatsim.services.chat import ChatService
        from chatsim.services.theme import ThemeService

        settings = get_settings()
        self.app_name = settings.app.NAME
        app_config.debug = settings.app.DEBUG

        app_config.request_class = HTMXRequest
        app_config.lifespan = [self.server_lifespan]

        # Logging middleware
        app_config.middleware.insert(0, StructlogMiddleware)
        app_config.after_exception.append(after_exception_hook_handler)

        app_config.openapi_config = OpenAPIConfig(
            title=settings.app.NAME,
            version=settings.app.VERSION,
            use_handler_docstrings=True,
            render_plugins=[ScalarRenderPlugin(version="latest")],
        )
        app_config.cors_config = config.cors
        app_config.compression_config = config.compression
        app_config.plugins.extend(
            [
                plugins.structlog,
                plugins.granian,
                plugins.problem_details,
                plugins.htmx,
            ],
        )

        app_config.template_config = TemplateConfig(
            directory=settings.app.TEMPLATE_DIR,
            engine=JinjaTemplateEngine,
        )
        app_config.exception_handlers.update(exception_handlers)  # type: ignore[arg-type]

        app_config.route_handlers.extend([ChatApiController, ChatPageController])

        app_config.signature_namespace.update({
            "RequestEncodingType": RequestEncodingType,
            "Body": Body,
            "UploadFile": UploadFile,
            "s": s,
            "ChatService": ChatService,
            "ThemeService": ThemeService,
        })
        return app_config
