from pydantic import BaseModel
from app.schemas.enums import FollowAction

class FollowToggleResponse(BaseModel):
    message: FollowAction
