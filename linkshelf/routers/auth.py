import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from linkshelf.dependencies import (
    get_cookie_policy,
    get_logout_handler,
    get_session_store,
    get_user_store,
)
from linkshelf.schemas.common import ErrorResponse, MessageResponse, error_response
from linkshelf.schemas.users import MeResponse
from linkshelf.services.cookies import SessionCookiePolicy
from linkshelf.services.logout import LogoutHandler
from linkshelf.services.sessions import SessionStore
from linkshelf.services.users import UserStore

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses={500: {"model": ErrorResponse}},
)
def logout(
    request: Request, handler: LogoutHandler = Depends(get_logout_handler)
) -> JSONResponse:
    return handler.handle(handler.cookie_policy.read_token(request))


@router.get(
    "/me",
    response_model=MeResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def get_me(
    request: Request,
    cookie_policy: SessionCookiePolicy = Depends(get_cookie_policy),
    session_store: SessionStore = Depends(get_session_store),
    user_store: UserStore = Depends(get_user_store),
):
    token = cookie_policy.read_token(request)
    if not token:
        return error_response(status.HTTP_401_UNAUTHORIZED, "No session")
    try:
        record = session_store.lookup_session(token)
        if record is None:
            return error_response(status.HTTP_401_UNAUTHORIZED, "Invalid session")
        user = user_store.get_verified_user(record.user_id)
    except Exception:
        LOGGER.exception("Session lookup failed")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
        )
    if user is None:
        return error_response(
            status.HTTP_401_UNAUTHORIZED, "User not found or not verified"
        )
    return MeResponse(user=user)
