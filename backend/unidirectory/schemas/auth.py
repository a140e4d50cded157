from pydantic import BaseModel, ConfigDict
from typing import Optional


class UserLogin(BaseModel):
    """Login body. Both fields are optional here so a missing one maps to 400, not 422."""
    email: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    statusCode: int = 200
    token: str
