from typing import Callable

from fastapi import Request

from linkshelf.schemas.urls import UrlMetadata
from linkshelf.services.cookies import SessionCookiePolicy
from linkshelf.services.logout import LogoutHandler
from linkshelf.services.sessions import SessionStore
from linkshelf.services.users import UserStore


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_cookie_policy(request: Request) -> SessionCookiePolicy:
    return request.app.state.cookie_policy


def get_logout_handler(request: Request) -> LogoutHandler:
    return request.app.state.logout_handler


def get_metadata_extractor(request: Request) -> Callable[[str], UrlMetadata]:
    return request.app.state.metadata_extractor
