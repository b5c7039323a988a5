import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.adapter.cache.redis_adaptor import RedisAdaptor
from src.adapter.repositories.session_repository import SessionRepository
from src.adapter.services.token_codec import JoseTokenCodec
from src.domain.settings import TokenSettings
from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(
        status_code=exc.status_code, content={"error": error_dict}, headers=exc.headers
    )


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


def create_app(ApplicationConfig, redis_client=None) -> FastAPI:
    """
    Build the application.

    Token settings, the codec and the Redis adaptor are created here once and
    shared read-only by every request. Invalid key material fails here, before
    any request is served.
    """
    logging.getLogger("src").setLevel(ApplicationConfig.LOG_LEVEL.upper())

    settings = TokenSettings.from_app_config(ApplicationConfig)
    codec = JoseTokenCodec(settings)
    if not settings.symmetric_revoke:
        logger.warning(
            "SYMMETRIC_REVOKE is disabled: a session revoked by ID stays in its "
            "principal map and can be refreshed again once its access token expires"
        )
    if redis_client is None:
        redis = RedisAdaptor.from_url(
            ApplicationConfig.REDIS_URL, settings.redis_operation_timeout
        )
    else:
        redis = RedisAdaptor(redis_client, settings.redis_operation_timeout)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await redis.close()

    app = FastAPI(title="Session Token Service", version="0.1.0", lifespan=lifespan)

    app.state.config = ApplicationConfig
    app.state.token_settings = settings
    app.state.token_codec = codec
    app.state.redis = redis
    app.state.session_repository = SessionRepository(
        redis,
        session_prefix=settings.session_key_prefix,
        principal_prefix=settings.principal_key_prefix,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import admin, auth, health_check, sessions, user

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Tokens"])
    app.include_router(user.router, tags=["User"])
    app.include_router(sessions.router, tags=["Sessions"])
    app.include_router(admin.router, tags=["Admin"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    logger.info("Session token service initialised")
    return app
