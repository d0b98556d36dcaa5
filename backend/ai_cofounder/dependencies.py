# ai_cofounder/dependencies.py
import logging
import os
from typing import List, Literal, Optional

from dotenv import load_dotenv
from fastapi import Depends, HTTPException, Request, status
from openai import AsyncOpenAI
from pydantic import BaseModel, Field, field_validator
from qdrant_client import AsyncQdrantClient
from supabase import Client, create_client

from ai_cofounder.exceptions import ConfigurationError
from ai_cofounder.services.database import CofounderDatabase
from ai_cofounder.services.llm import ChatCompletionService
from ai_cofounder.services.vector_index import ConversationIndex

# Load environment variables from .env for local runs; real deployments set them directly.
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Runtime configuration, read once from the environment at startup."""
    supabase_url: Optional[str] = None
    supabase_service_key: Optional[str] = None

    openai_api_key: Optional[str] = None
    openai_chat_model: str = "gpt-3.5-turbo"
    openai_embedding_model: str = "text-embedding-ada-002"
    embedding_dimensions: int = 1536
    chat_max_tokens: int = Field(default=300, gt=0)
    chat_temperature: float = Field(default=0.7, ge=0, le=2)
    chat_history_window: int = Field(default=5, ge=0)

    qdrant_url: Optional[str] = None
    qdrant_api_key: Optional[str] = None
    qdrant_collection: str = "cofounder_ideas"
    chat_index_conversations: bool = True

    auth_strategy: Literal["supabase", "demo"] = "supabase"
    demo_auth_token: Optional[str] = None
    demo_user_id: str = "00000000-0000-0000-0000-000000000000"

    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

    @classmethod
    def from_env(cls) -> "Settings":
        env = os.environ
        try:
            settings = cls(
                supabase_url=env.get("SUPABASE_URL") or env.get("NEXT_PUBLIC_SUPABASE_URL"),
                supabase_service_key=env.get("SUPABASE_SERVICE_KEY") or env.get("SUPABASE_SERVICE_ROLE_KEY"),
                openai_api_key=env.get("OPENAI_API_KEY"),
                openai_chat_model=env.get("OPENAI_CHAT_MODEL", "gpt-3.5-turbo"),
                openai_embedding_model=env.get("OPENAI_EMBEDDING_MODEL", "text-embedding-ada-002"),
                embedding_dimensions=int(env.get("EMBEDDING_DIMENSIONS", "1536")),
                chat_max_tokens=int(env.get("CHAT_MAX_TOKENS", "300")),
                chat_temperature=float(env.get("CHAT_TEMPERATURE", "0.7")),
                qdrant_url=env.get("QDRANT_URL"),
                qdrant_api_key=env.get("QDRANT_API_KEY"),
                qdrant_collection=env.get("QDRANT_COLLECTION", "cofounder_ideas"),
                chat_index_conversations=_env_bool("CHAT_INDEX_CONVERSATIONS", True),
                auth_strategy=env.get("AUTH_STRATEGY", "supabase").strip().lower(),
                demo_auth_token=env.get("DEMO_AUTH_TOKEN"),
                demo_user_id=env.get("DEMO_USER_ID", "00000000-0000-0000-0000-000000000000"),
                cors_origins=[o.strip() for o in env.get("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()],
                log_level=env.get("LOG_LEVEL", "INFO").upper(),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment configuration: {e}") from e

        if settings.auth_strategy == "demo" and not settings.demo_auth_token:
            raise ConfigurationError("AUTH_STRATEGY=demo requires DEMO_AUTH_TOKEN to be set.")
        return settings


class AppClients:
    """Clients built once per application from Settings and kept on ``app.state``."""

    def __init__(
        self,
        supabase: Optional[Client] = None,
        openai: Optional[AsyncOpenAI] = None,
        qdrant: Optional[AsyncQdrantClient] = None,
    ):
        self.supabase = supabase
        self.openai = openai
        self.qdrant = qdrant

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppClients":
        supabase = None
        if settings.supabase_url and settings.supabase_service_key:
            supabase = create_client(settings.supabase_url, settings.supabase_service_key)
        openai = AsyncOpenAI(api_key=settings.openai_api_key) if settings.openai_api_key else None
        qdrant = None
        if settings.qdrant_url:
            qdrant = AsyncQdrantClient(url=settings.qdrant_url, api_key=settings.qdrant_api_key or None)
        return cls(supabase=supabase, openai=openai, qdrant=qdrant)

    async def aclose(self) -> None:
        if self.openai is not None:
            await self.openai.close()
        if self.qdrant is not None:
            await self.qdrant.close()


# --------------------------------------------------------------------------- #
# FastAPI dependencies
# --------------------------------------------------------------------------- #

def get_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Application settings are not loaded.",
        )
    return settings


def _get_clients(request: Request) -> AppClients:
    return getattr(request.app.state, "clients", None) or AppClients()


def get_supabase_client(request: Request) -> Client:
    """FastAPI dependency returning the app's Supabase client."""
    client = _get_clients(request).supabase
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Supabase client is not available. Check backend environment variables.",
        )
    return client


def get_database(supabase: Client = Depends(get_supabase_client)) -> CofounderDatabase:
    return CofounderDatabase(supabase)


def get_optional_database(request: Request) -> Optional[CofounderDatabase]:
    """Database wrapper, or ``None`` when Supabase isn't configured (health checks)."""
    client = _get_clients(request).supabase
    return CofounderDatabase(client) if client is not None else None


def get_chat_service(request: Request, settings: Settings = Depends(get_settings)) -> Optional[ChatCompletionService]:
    """Chat service, or ``None`` when no OpenAI key is configured (chat degrades to a canned reply)."""
    client = _get_clients(request).openai
    if client is None:
        return None
    return ChatCompletionService(client, settings)


def get_conversation_index(request: Request, settings: Settings = Depends(get_settings)) -> Optional[ConversationIndex]:
    """Vector index over past exchanges, or ``None`` when Qdrant isn't configured."""
    client = _get_clients(request).qdrant
    if client is None:
        return None
    return ConversationIndex(client, settings.qdrant_collection, vector_size=settings.embedding_dimensions)
