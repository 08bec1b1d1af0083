from datetime import datetime
from pydantic import BaseModel
from app.schemas.user import UserRead

class Token(BaseModel):
    """OAuth2 token response"""
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime

class AuthResponse(Token):
    message: str
    user: UserRead

class LogoutResponse(BaseModel):
    message: str
