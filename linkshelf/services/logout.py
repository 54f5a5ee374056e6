import logging

from fastapi import status
from fastapi.responses import JSONResponse

from linkshelf.schemas.common import MessageResponse, error_response
from linkshelf.services.cookies import SessionCookiePolicy
from linkshelf.services.sessions import DeletionOutcome, SessionStore, mask_token

LOGGER = logging.getLogger(__name__)

LOGOUT_MESSAGE = "Logged out successfully"


class LogoutHandler:
    def __init__(
        self, session_store: SessionStore, cookie_policy: SessionCookiePolicy
    ) -> None:
        self._session_store = session_store
        self._cookie_policy = cookie_policy

    @property
    def cookie_policy(self) -> SessionCookiePolicy:
        return self._cookie_policy

    def handle(self, token: str | None) -> JSONResponse:
        try:
            if token:
                outcome = self._session_store.delete_session(token)
                self._log_outcome(token, outcome)
            else:
                LOGGER.info("Logout without a session cookie")
            response = JSONResponse(
                MessageResponse(message=LOGOUT_MESSAGE).model_dump(),
                status_code=status.HTTP_200_OK,
            )
        except Exception:
            LOGGER.exception("Logout failed")
            response = error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
            )
        self._cookie_policy.clear(response)
        return response

    def _log_outcome(self, token: str, outcome: DeletionOutcome) -> None:
        if outcome is DeletionOutcome.DELETED:
            LOGGER.info("Session deleted on logout token=%s", mask_token(token))
        elif outcome is DeletionOutcome.NOT_FOUND:
            LOGGER.info("Logout for unknown session token=%s", mask_token(token))
        else:
            LOGGER.warning(
                "Session could not be deleted on logout token=%s", mask_token(token)
            )
