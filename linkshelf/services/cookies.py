from dataclasses import dataclass

from fastapi import Request, Response

from linkshelf.config import Settings

_SAME_SITE_VALUES = {"lax": "Lax", "strict": "Strict", "none": "None"}


@dataclass(frozen=True)
class SessionCookiePolicy:
    name: str = "session"
    secure: bool = False
    http_only: bool = True
    same_site: str = "lax"
    path: str = "/"

    def __post_init__(self) -> None:
        if self.same_site not in _SAME_SITE_VALUES:
            raise ValueError(f"Unsupported SameSite value: {self.same_site}")
        if self.same_site == "none" and not self.secure:
            raise ValueError("SameSite=None cookies must be Secure")

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionCookiePolicy":
        return cls(
            name=settings.session_cookie_name,
            secure=settings.cookie_secure,
            same_site=settings.session_cookie_same_site,
        )

    def read_token(self, request: Request) -> str | None:
        value = request.cookies.get(self.name)
        if value is None:
            return None
        return value.strip() or None

    def clearing_header(self) -> str:
        parts = [f"{self.name}=", f"Path={self.path}", "Max-Age=0"]
        if self.http_only:
            parts.append("HttpOnly")
        parts.append(f"SameSite={_SAME_SITE_VALUES[self.same_site]}")
        if self.secure:
            parts.append("Secure")
        return "; ".join(parts)

    def clear(self, response: Response) -> None:
        response.headers.append("set-cookie", self.clearing_header())
