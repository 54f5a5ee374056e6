from typing import Optional

from pydantic import BaseModel


class UserSummary(BaseModel):
    id: int
    name: Optional[str] = None
    email: str


class MeResponse(BaseModel):
    user: UserSummary
