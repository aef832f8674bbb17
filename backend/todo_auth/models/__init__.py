from todo_auth.models.refresh_token import RefreshToken
from todo_auth.models.user import User

__all__ = [
    "RefreshToken",
    "User",
]
