"""Dependency injection for API routes.

Provides FastAPI dependencies for stores, providers and the event
dispatcher. Instances are created once per process from settings and can be
overridden for testing via app.dependency_overrides.
"""

from typing import Annotated

from fastapi import Depends

from parley.config import get_settings
from parley.config.settings import Settings
from parley.db.pool import PostgresPool
from parley.events.dispatcher import EventDispatcher
from parley.grounding.completion import CompletionInvoker
from parley.grounding.publisher import ResponsePublisher
from parley.grounding.responder import GroundedResponder
from parley.idempotency.dedupe import DedupeCache
from parley.jobs.client import HatchetClient
from parley.jobs.queue import HatchetJobQueue, InMemoryJobQueue, JobQueue
from parley.live.activator import LiveSessionActivator
from parley.observability.logging import get_logger
from parley.providers.chat import ChatPlatform, InMemoryChatPlatform, StreamChatPlatform
from parley.providers.llm import LLMExecutor, LLMProvider
from parley.providers.realtime import (
    InMemoryRealtimeBridgeProvider,
    RealtimeBridgeProvider,
    StreamVideoBridgeProvider,
)
from parley.sessions.lifecycle import LifecycleManager
from parley.sessions.store import PersonaStore, SessionStore
from parley.sessions.stores.inmemory import InMemoryPersonaStore, InMemorySessionStore
from parley.sessions.stores.postgres import PostgresPersonaStore, PostgresSessionStore

logger = get_logger(__name__)

# Connection pool - shared across stores
_postgres_pool: PostgresPool | None = None

# Instances - created once and reused
_session_store: SessionStore | None = None
_persona_store: PersonaStore | None = None
_dedupe_cache: DedupeCache | None = None
_chat_platform: ChatPlatform | None = None
_bridge_provider: RealtimeBridgeProvider | None = None
_job_queue: JobQueue | None = None
_llm_provider: LLMProvider | None = None
_dispatcher: EventDispatcher | None = None


async def get_postgres_pool(
    settings: Annotated[Settings, Depends(get_settings)],
) -> PostgresPool:
    """Get the shared PostgreSQL connection pool, connecting on first access."""
    global _postgres_pool
    if _postgres_pool is None:
        _postgres_pool = PostgresPool(
            dsn=settings.storage.dsn,
            min_size=settings.storage.min_pool_size,
            max_size=settings.storage.max_pool_size,
        )
        await _postgres_pool.connect()
        logger.info("postgres_pool_connected")
    return _postgres_pool


async def get_session_store(
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionStore:
    """Get the SessionStore for the configured storage backend."""
    global _session_store
    if _session_store is None:
        if settings.storage.backend == "postgres":
            _session_store = PostgresSessionStore(await get_postgres_pool(settings))
        else:
            _session_store = InMemorySessionStore()
        logger.info("session_store_initialized", store_type=settings.storage.backend)
    return _session_store


async def get_persona_store(
    settings: Annotated[Settings, Depends(get_settings)],
) -> PersonaStore:
    """Get the PersonaStore for the configured storage backend."""
    global _persona_store
    if _persona_store is None:
        if settings.storage.backend == "postgres":
            _persona_store = PostgresPersonaStore(await get_postgres_pool(settings))
        else:
            _persona_store = InMemoryPersonaStore()
        logger.info("persona_store_initialized", store_type=settings.storage.backend)
    return _persona_store


def get_dedupe_cache(
    settings: Annotated[Settings, Depends(get_settings)],
) -> DedupeCache:
    """Get the process-wide DedupeCache."""
    global _dedupe_cache
    if _dedupe_cache is None:
        _dedupe_cache = DedupeCache(ttl_seconds=settings.webhook.dedupe_ttl_seconds)
    return _dedupe_cache


def get_chat_platform(
    settings: Annotated[Settings, Depends(get_settings)],
) -> ChatPlatform:
    """Get the chat platform client.

    Raises:
        ValueError: The stream backend is selected without credentials
    """
    global _chat_platform
    if _chat_platform is None:
        stream = settings.providers.stream
        if stream.chat_backend == "inmemory":
            secret = stream.api_secret.get_secret_value() if stream.api_secret else "test-secret"
            _chat_platform = InMemoryChatPlatform(api_secret=secret)
        else:
            if stream.api_key is None or stream.api_secret is None:
                raise ValueError("providers.stream.api_key and api_secret are required")
            _chat_platform = StreamChatPlatform(
                api_key=stream.api_key.get_secret_value(),
                api_secret=stream.api_secret.get_secret_value(),
            )
        logger.info("chat_platform_initialized", backend=stream.chat_backend)
    return _chat_platform


def get_bridge_provider(
    settings: Annotated[Settings, Depends(get_settings)],
) -> RealtimeBridgeProvider:
    """Get the realtime bridge provider.

    Raises:
        ValueError: The stream backend is selected without credentials
    """
    global _bridge_provider
    if _bridge_provider is None:
        realtime = settings.providers.realtime
        if realtime.backend == "inmemory":
            _bridge_provider = InMemoryRealtimeBridgeProvider()
        else:
            stream = settings.providers.stream
            if stream.api_key is None or stream.api_secret is None:
                raise ValueError("providers.stream.api_key and api_secret are required")
            _bridge_provider = StreamVideoBridgeProvider(
                realtime,
                api_key=stream.api_key.get_secret_value(),
                api_secret=stream.api_secret.get_secret_value(),
            )
        logger.info("bridge_provider_initialized", backend=realtime.backend)
    return _bridge_provider


def get_job_queue(
    settings: Annotated[Settings, Depends(get_settings)],
) -> JobQueue:
    """Get the job queue; in-memory when Hatchet is disabled."""
    global _job_queue
    if _job_queue is None:
        if settings.jobs.hatchet.enabled:
            _job_queue = HatchetJobQueue(HatchetClient(settings.jobs.hatchet))
        else:
            _job_queue = InMemoryJobQueue()
        logger.info("job_queue_initialized", hatchet=settings.jobs.hatchet.enabled)
    return _job_queue


def get_llm_provider(
    settings: Annotated[Settings, Depends(get_settings)],
) -> LLMProvider:
    """Get the LLM executor for grounded completions."""
    global _llm_provider
    if _llm_provider is None:
        _llm_provider = LLMExecutor(
            model=settings.completion.model,
            timeout=settings.completion.timeout,
        )
    return _llm_provider


def build_dispatcher(
    settings: Settings,
    session_store: SessionStore,
    persona_store: PersonaStore,
    dedupe_cache: DedupeCache,
    chat_platform: ChatPlatform,
    bridge_provider: RealtimeBridgeProvider,
    job_queue: JobQueue,
    llm_provider: LLMProvider,
) -> EventDispatcher:
    """Wire an EventDispatcher from its collaborators."""
    completion = CompletionInvoker(
        llm=llm_provider,
        model=settings.completion.model,
        temperature=settings.completion.temperature,
        max_tokens=settings.completion.max_tokens,
    )
    return EventDispatcher(
        chat_platform=chat_platform,
        dedupe_cache=dedupe_cache,
        lifecycle=LifecycleManager(session_store, bridge_provider, job_queue),
        activator=LiveSessionActivator(
            persona_store, bridge_provider, settings.persona.policy_wrapper
        ),
        responder=GroundedResponder(
            session_store=session_store,
            persona_store=persona_store,
            chat_platform=chat_platform,
            completion=completion,
            publisher=ResponsePublisher(chat_platform),
            persona_config=settings.persona,
        ),
    )


async def get_event_dispatcher(
    settings: Annotated[Settings, Depends(get_settings)],
    session_store: Annotated[SessionStore, Depends(get_session_store)],
    persona_store: Annotated[PersonaStore, Depends(get_persona_store)],
    dedupe_cache: Annotated[DedupeCache, Depends(get_dedupe_cache)],
    chat_platform: Annotated[ChatPlatform, Depends(get_chat_platform)],
    bridge_provider: Annotated[RealtimeBridgeProvider, Depends(get_bridge_provider)],
    job_queue: Annotated[JobQueue, Depends(get_job_queue)],
    llm_provider: Annotated[LLMProvider, Depends(get_llm_provider)],
) -> EventDispatcher:
    """Get the EventDispatcher."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = build_dispatcher(
            settings,
            session_store,
            persona_store,
            dedupe_cache,
            chat_platform,
            bridge_provider,
            job_queue,
            llm_provider,
        )
    return _dispatcher


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
PersonaStoreDep = Annotated[PersonaStore, Depends(get_persona_store)]
EventDispatcherDep = Annotated[EventDispatcher, Depends(get_event_dispatcher)]


async def reset_dependencies() -> None:
    """Reset all dependency singletons.

    Closes connections before resetting.
    """
    global _postgres_pool, _session_store, _persona_store, _dedupe_cache
    global _chat_platform, _bridge_provider, _job_queue, _llm_provider, _dispatcher

    if _postgres_pool is not None:
        await _postgres_pool.close()
    if isinstance(_bridge_provider, StreamVideoBridgeProvider):
        await _bridge_provider.close()
    if isinstance(_chat_platform, StreamChatPlatform):
        await _chat_platform.close()

    _postgres_pool = None
    _session_store = None
    _persona_store = None
    _dedupe_cache = None
    _chat_platform = None
    _bridge_provider = None
    _job_queue = None
    _llm_provider = None
    _dispatcher = None
