from fastapi import Request

from src.adapter.cache.redis_adaptor import RedisAdaptor
from src.app.repositories.session_repository import ISessionRepository
from src.app.services.token_codec import ITokenCodec
from src.domain.settings import TokenSettings

# Collaborators are built once in create_app and kept on app.state; these
# providers hand them to routes and the authentication gate.


def get_token_settings(request: Request) -> TokenSettings:
    return request.app.state.token_settings


def get_redis_adaptor(request: Request) -> RedisAdaptor:
    return request.app.state.redis


def get_session_repository(request: Request) -> ISessionRepository:
    return request.app.state.session_repository


def get_token_codec(request: Request) -> ITokenCodec:
    return request.app.state.token_codec
