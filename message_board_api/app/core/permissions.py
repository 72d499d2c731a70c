"""
Authorization rules for message operations.

Access is decided from two coarse identity classes.  Public callers
(anonymous, or holding a public API key) may only read; authenticated
callers may read, create, update and delete.  The caller's class is
resolved beforehand by :mod:`message_board_api.app.core.security`;
this module only consumes it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional

from .errors import Unauthorized


class IdentityClass(str, Enum):
    PUBLIC = "public"
    AUTHENTICATED = "authenticated"


class Operation(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


PERMISSIONS: Dict[IdentityClass, FrozenSet[Operation]] = {
    IdentityClass.PUBLIC: frozenset({Operation.READ}),
    # Update and delete are granted even though the board UI only ever
    # increments likes.
    IdentityClass.AUTHENTICATED: frozenset(
        {Operation.READ, Operation.CREATE, Operation.UPDATE, Operation.DELETE}
    ),
}


@dataclass(frozen=True)
class Caller:
    """Identity of whoever invokes a service operation.

    ``principal`` and ``email`` are only known for authenticated callers
    and come from the verified session token.
    """

    identity_class: IdentityClass
    principal: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def public(cls) -> "Caller":
        return cls(IdentityClass.PUBLIC)

    @classmethod
    def authenticated(cls, principal: str, email: Optional[str] = None) -> "Caller":
        return cls(IdentityClass.AUTHENTICATED, principal=principal, email=email)

    @property
    def is_authenticated(self) -> bool:
        return self.identity_class is IdentityClass.AUTHENTICATED


def authorize(operation: Operation, identity_class: IdentityClass) -> bool:
    """Return whether ``identity_class`` may perform ``operation``."""
    return operation in PERMISSIONS.get(IdentityClass(identity_class), frozenset())


def require(operation: Operation, caller: Caller) -> None:
    """Raise ``Unauthorized`` unless ``caller`` may perform ``operation``."""
    if not authorize(operation, caller.identity_class):
        raise Unauthorized()
