from dataclasses import dataclass
from typing import Optional

from flask_jwt_extended import get_jwt, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from mealplanner.access.errors import RoleError

TRAINER = "trainer"


@dataclass(frozen=True)
class UserContext:
    id: str
    role: str

    @property
    def is_trainer(self):
        return self.role == TRAINER


def current_user_context() -> Optional[UserContext]:
    """Build the caller's context from the request JWT.

    Missing, malformed or expired tokens yield None rather than an error so
    the caller can fail closed with a single response shape.
    """
    try:
        verify_jwt_in_request(optional=True)
        claims = get_jwt()
    except (JWTExtendedException, PyJWTError):
        return None

    identity = claims.get("sub") if claims else None
    role = claims.get("role") if claims else None
    if not identity or not role:
        return None
    return UserContext(id=str(identity), role=role)


def require_trainer(user: Optional[UserContext]) -> UserContext:
    if user is None or not user.is_trainer:
        raise RoleError()
    return user
