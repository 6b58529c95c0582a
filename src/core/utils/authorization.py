"""Principal extraction and creator-or-admin checks.

Authentication happens upstream in the API Gateway authorizer; handlers
only read the principal it attached to ``requestContext.authorizer``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from core.models.errors import ForbiddenError
from core.models.pet import Pet
from core.utils.constants import ADMIN_ROLE, ERROR_CODE_UNAUTHENTICATED


class Principal(BaseModel):
    """The authenticated caller."""

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., min_length=1)
    role: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def principal_from_event(event: dict[str, Any]) -> Principal | None:
    """Read the principal from a Lambda or Cognito authorizer context."""
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    claims = authorizer.get("claims") or {}

    user_id = (
        authorizer.get("user_id")
        or authorizer.get("userId")
        or authorizer.get("principalId")
        or claims.get("sub")
    )
    if not user_id:
        return None

    role = authorizer.get("role") or claims.get("custom:role")
    return Principal(user_id=str(user_id), role=str(role) if role else None)


def require_principal(event: dict[str, Any]) -> Principal:
    """Return the principal or reject the request.

    Raises:
        ForbiddenError: If the request carries no authenticated principal
    """
    principal = principal_from_event(event)
    if principal is None:
        raise ForbiddenError(
            message="Authentication required",
            error_code=ERROR_CODE_UNAUTHENTICATED,
        )
    return principal


def ensure_can_modify(pet: Pet, principal: Principal) -> None:
    """Allow only the pet's creator or an admin to change it.

    Raises:
        ForbiddenError: If the principal is neither
    """
    if principal.is_admin:
        return

    if pet.created_by and pet.created_by == principal.user_id:
        return

    raise ForbiddenError(
        message="You can only modify pets you created",
        details={"pet_id": pet.pet_id},
    )
