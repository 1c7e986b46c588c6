from typing import List, Optional
from pydantic import BaseModel

from .users import GlobalRole


# email is optional at the schema level so a missing value maps to 400, not 422
class PromoteRequest(BaseModel):
    email: Optional[str] = None
    role: Optional[GlobalRole] = None


class PromoteResponse(BaseModel):
    success: bool
    uid: str
    message: str = "User promoted/created successfully"


class ResetLinkRequest(BaseModel):
    email: Optional[str] = None


class ResetLinkResponse(BaseModel):
    message: str = "Reset link sent successfully"


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterResponse(BaseModel):
    uid: str
    email: str
    courses: List[str]
