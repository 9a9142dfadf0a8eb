"""Acting-user identity as asserted by the upstream authentication layer.

Authentication and session issuance happen outside this service. Requests
reach the API with the authenticated user's id and role already resolved;
the core trusts them opaquely and only uses them for ownership checks.
"""

from dataclasses import dataclass
from enum import Enum

from fastapi import Depends, Header

from shared.errors import Unauthorized


class Role(Enum):
    BUYER = "buyer"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    user_id: str
    role: str = Role.BUYER.value

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def can_act_for(self, owner_id) -> bool:
        """True when the actor owns the resource or is an admin."""
        return self.is_admin or str(owner_id) == str(self.user_id)


def current_actor(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Actor:
    if not x_user_id:
        raise Unauthorized("Authentication required")
    role = x_user_role if x_user_role in {r.value for r in Role} else Role.BUYER.value
    return Actor(user_id=x_user_id, role=role)


def optional_actor(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Actor | None:
    if not x_user_id:
        return None
    return current_actor(x_user_id=x_user_id, x_user_role=x_user_role)


def require_admin(actor: Actor = Depends(current_actor)) -> Actor:
    if not actor.is_admin:
        raise Unauthorized("Admin access required")
    return actor
