from datetime import datetime
from pydantic import BaseModel, EmailStr, SecretStr, Field

class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: SecretStr = Field(..., min_length=6)

class UserLogin(BaseModel):
    email: EmailStr
    password: SecretStr

class UserPublic(BaseModel):
    """What other users get to see"""
    id: str
    name: str

    class Config:
        from_attributes = True

class UserRead(UserPublic):
    email: str
    created_at: datetime
