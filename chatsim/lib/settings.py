"""Application settings loaded from the environment."""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, cast

from litestar.data_extractors import RequestExtractorField

from chatsim.utils.env import get_env

if TYPE_CHECKING:
    from collections.abc import Callable

    from litestar.data_extractors import ResponseExtractorField

DEFAULT_MODULE_NAME = "chatsim"
BASE_DIR = Path(__file__).parent.parent
SERVER_DIR = Path(BASE_DIR / "server")
TEMPLATE_DIR = Path(SERVER_DIR / "templates")
DATA_DIR = Path.home() / ".chatsim"


@dataclass
class StorageSettings:
    """Durable key-value storage settings."""

    DATA_DIR: Path = field(default_factory=get_env("CHAT_DATA_DIR", DATA_DIR))
    """Directory backing the file store."""
    CONVERSATION_KEY: str = field(default_factory=get_env("CHAT_CONVERSATION_KEY", "conversation-log"))
    """Key holding the serialized conversation log."""
    THEME_KEY: str = field(default_factory=get_env("CHAT_THEME_KEY", "theme"))
    """Key holding the theme preference."""


@dataclass
class ChatSettings:
    """Conversation behaviour settings."""

    DEFAULT_PERSONA: str = field(default_factory=get_env("CHAT_DEFAULT_PERSONA", "helper"))
    """Persona selected at start-up, and whenever a configured id does not resolve."""
    USER_AVATAR: str = field(default_factory=get_env("CHAT_USER_AVATAR", "https://i.pravatar.cc/48?img=3"))
    """Avatar stamped on every user message."""
    WELCOME_TEXT: str = field(
        default_factory=get_env("CHAT_WELCOME_TEXT", "Welcome to the WhatsApp-style demo. Send a message to start."),
    )
    """Bot message seeded into an empty log."""
    MAX_IMAGE_BYTES: int = field(default_factory=get_env("CHAT_MAX_IMAGE_BYTES", 2 * 1024 * 1024))
    """Largest accepted image upload."""
    TIME_FORMAT: str = field(default_factory=get_env("CHAT_TIME_FORMAT", "%H:%M"))
    """strftime format for message timestamps."""


@dataclass
class ResponderSettings:
    """Simulated bot timing.

    All values are milliseconds.
    """

    MIN_DELAY_MS: int = field(default_factory=get_env("RESPONDER_MIN_DELAY_MS", 700))
    """Lower bound of the typing delay."""
    MAX_DELAY_MS: int = field(default_factory=get_env("RESPONDER_MAX_DELAY_MS", 2200))
    """Upper bound of the typing delay."""
    TEXT_LEAD_IN_MIN_MS: int = field(default_factory=get_env("RESPONDER_TEXT_LEAD_IN_MIN_MS", 250))
    TEXT_LEAD_IN_MAX_MS: int = field(default_factory=get_env("RESPONDER_TEXT_LEAD_IN_MAX_MS", 550))
    IMAGE_LEAD_IN_MIN_MS: int = field(default_factory=get_env("RESPONDER_IMAGE_LEAD_IN_MIN_MS", 800))
    IMAGE_LEAD_IN_MAX_MS: int = field(default_factory=get_env("RESPONDER_IMAGE_LEAD_IN_MAX_MS", 1300))
    CANCEL_ON_CLEAR: bool = field(default_factory=get_env("RESPONDER_CANCEL_ON_CLEAR", False))
    """Drop the tracked in-flight reply when the log is cleared."""

    def __post_init__(self) -> None:
        pairs = (
            ("MIN_DELAY_MS", "MAX_DELAY_MS"),
            ("TEXT_LEAD_IN_MIN_MS", "TEXT_LEAD_IN_MAX_MS"),
            ("IMAGE_LEAD_IN_MIN_MS", "IMAGE_LEAD_IN_MAX_MS"),
        )
        for low, high in pairs:
            if getattr(self, low) < 0 or getattr(self, low) > getattr(self, high):
                msg = f"{low} must be non-negative and not greater than {high}."
                raise ValueError(msg)


@dataclass
class LogSettings:
    """Logger configuration."""

    LEVEL: int = field(default_factory=get_env("LOG_LEVEL", 30))
    """Stdlib log levels.

    Only emit logs at this level, or higher.
    """
    REQUEST_FIELDS: list[RequestExtractorField] = field(
        default_factory=get_env(
            "LOG_REQUEST_FIELDS",
            [
                "path",
                "method",
                "query",
                "path_params",
            ],
            list[RequestExtractorField],
        ),
    )
    """Attributes of the Request to be logged."""
    RESPONSE_FIELDS: list[ResponseExtractorField] = field(
        default_factory=cast(
            "Callable[[],list[ResponseExtractorField]]",
            get_env(
                "LOG_RESPONSE_FIELDS",
                ["status_code"],
            ),
        ),
    )
    """Attributes of the Response to be logged."""
    ASGI_ACCESS_LEVEL: int = field(default_factory=get_env("ASGI_ACCESS_LOG_LEVEL", 30))
    """Level to log granian access logs."""
    ASGI_ERROR_LEVEL: int = field(default_factory=get_env("ASGI_ERROR_LOG_LEVEL", 30))
    """Level to log granian error logs."""


@dataclass
class AppSettings:
    """Application configuration."""

    NAME: str = field(default_factory=lambda: "Chat Simulator")
    """Application name."""
    VERSION: str = field(default="0.1.0")
    """Current application version."""
    DEBUG: bool = field(default_factory=get_env("DEBUG", False))
    """Run application with debug mode."""
    TEMPLATE_DIR: Path = field(default_factory=get_env("TEMPLATE_DIR", TEMPLATE_DIR))
    """Template directory path."""
    ALLOWED_CORS_ORIGINS: list[str] | str = field(default_factory=get_env("ALLOWED_CORS_ORIGINS", ["*"], list[str]))
    """Allowed CORS Origins"""

    def __post_init__(self) -> None:
        if isinstance(self.ALLOWED_CORS_ORIGINS, str):
            if self.ALLOWED_CORS_ORIGINS.startswith("[") and self.ALLOWED_CORS_ORIGINS.endswith("]"):
                try:
                    self.ALLOWED_CORS_ORIGINS = json.loads(self.ALLOWED_CORS_ORIGINS)  # pyright: ignore[reportConstantRedefinition]
                except (SyntaxError, ValueError):
                    msg = "ALLOWED_CORS_ORIGINS is not a valid list representation."
                    raise ValueError(msg) from None
            else:
                self.ALLOWED_CORS_ORIGINS = [host.strip() for host in self.ALLOWED_CORS_ORIGINS.split(",")]  # pyright: ignore[reportConstantRedefinition]


@dataclass
class Settings:
    """Main application settings."""

    app: AppSettings = field(default_factory=AppSettings)
    storage: StorageSettings = field(default_factory=StorageSettings)
    chat: ChatSettings = field(default_factory=ChatSettings)
    responder: ResponderSettings = field(default_factory=ResponderSettings)
    log: LogSettings = field(default_factory=LogSettings)

    @classmethod
    @lru_cache(maxsize=1, typed=True)
    def from_env(cls, dotenv_filename: str = ".env") -> Settings:
        from dotenv import load_dotenv

        env_file = Path(f"{os.curdir}/{dotenv_filename}")
        if env_file.is_file():
            load_dotenv(env_file, override=True)

        try:
            app: AppSettings = AppSettings()
            storage: StorageSettings = StorageSettings()
            chat: ChatSettings = ChatSettings()
            responder: ResponderSettings = ResponderSettings()
            log: LogSettings = LogSettings()
        except (ValueError, TypeError, KeyError) as e:
            import structlog

            logger = structlog.get_logger()
            logger.fatal("Could not load settings", error=str(e))
            sys.exit(1)

        return Settings(app=app, storage=storage, chat=chat, responder=responder, log=log)


def get_settings(dotenv_filename: str = ".env") -> Settings:
    """Get application settings."""
    return Settings.from_env(dotenv_filename)
