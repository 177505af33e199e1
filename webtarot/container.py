"""Dependency injection container."""
from concurrent.futures import ThreadPoolExecutor

from dependency_injector import containers, providers

from webtarot.repositories.reading_repository import ReadingRepository
from webtarot.repositories.user_repository import AccessTokenRepository, UserRepository

from webtarot.services.activity_logger import ActivityLogger
from webtarot.services.auth_service import AuthService
from webtarot.services.broadcaster import Broadcaster
from webtarot.services.explain_service import ExplainService, create_prompt_service
from webtarot.services.interpretation_service import InterpretationService
from webtarot.services.llm_adapter import GeminiAdapter, OpenAIChatAdapter
from webtarot.services.stats_service import StatsService
from webtarot.services.user_service import UserService


class Container(containers.DeclarativeContainer):
    """
    Application dependency injection container.

    Usage:
        container = Container()
        container.config.from_dict(app.config)
        container.db_session.override(db.session)

        interpretation_service = container.interpretation_service()
    """

    # Configuration
    config = providers.Configuration()

    # Database session - must be overridden with actual db.session
    db_session = providers.Dependency()

    # ==================
    # Repositories
    # ==================

    reading_repository = providers.Factory(
        ReadingRepository,
        session=db_session
    )

    user_repository = providers.Factory(
        UserRepository,
        session=db_session
    )

    access_token_repository = providers.Factory(
        AccessTokenRepository,
        session=db_session
    )

    # ==================
    # Process-wide singletons
    # ==================

    activity_logger = providers.Singleton(
        ActivityLogger
    )

    broadcaster = providers.Singleton(
        Broadcaster
    )

    executor = providers.Singleton(
        ThreadPoolExecutor,
        max_workers=config.INTERPRETATION_WORKERS.as_int(),
        thread_name_prefix="interpretation",
    )

    # ==================
    # Interpretation backend
    # ==================

    openai_adapter = providers.Singleton(
        OpenAIChatAdapter,
        api_key=config.OPENAI_API_KEY,
        base_url=config.OPENAI_BASE_URL,
    )

    gemini_adapter = providers.Singleton(
        GeminiAdapter,
        api_key=config.GOOGLE_API_KEY,
        base_url=config.GEMINI_BASE_URL,
    )

    prompt_service = providers.Singleton(
        create_prompt_service,
        prompts_file=config.PROMPTS_FILE,
    )

    explain_service = providers.Singleton(
        ExplainService,
        openai_adapter=openai_adapter,
        gemini_adapter=gemini_adapter,
        prompt_service=prompt_service,
    )

    # ==================
    # Services
    # ==================

    interpretation_service = providers.Factory(
        InterpretationService,
        reading_repository=reading_repository,
        explain_service=explain_service,
        broadcaster=broadcaster,
        executor=executor,
        activity_logger=activity_logger,
    )

    stats_service = providers.Factory(
        StatsService,
        interpretation_service=interpretation_service,
    )

    auth_service = providers.Factory(
        AuthService,
        user_repository=user_repository,
        token_repository=access_token_repository,
        interpretation_service=interpretation_service,
        activity_logger=activity_logger,
    )

    user_service = providers.Factory(
        UserService,
        user_repository=user_repository,
        token_repository=access_token_repository,
    )
