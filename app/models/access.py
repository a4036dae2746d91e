"""Value types for access decisions and entity references."""

from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import Any


class EntityKind(str, PyEnum):
    """Kinds of entity that can be the subject of a permission check."""

    TEAM = "team"
    BOOK = "book"
    ACCOUNT = "account"
    CATEGORY = "category"
    TRANSACTION = "transaction"


@dataclass(frozen=True)
class EntityRef:
    """
    Discriminated reference to an entity whose governing team decides access.

    The id is kept as received; EntityLookup treats malformed ids as missing.
    """

    kind: EntityKind
    id: Any

    @classmethod
    def team(cls, team_id) -> "EntityRef":
        return cls(EntityKind.TEAM, team_id)

    @classmethod
    def book(cls, book_id) -> "EntityRef":
        return cls(EntityKind.BOOK, book_id)

    @classmethod
    def account(cls, account_id) -> "EntityRef":
        return cls(EntityKind.ACCOUNT, account_id)

    @classmethod
    def category(cls, category_id) -> "EntityRef":
        return cls(EntityKind.CATEGORY, category_id)

    @classmethod
    def transaction(cls, transaction_id) -> "EntityRef":
        return cls(EntityKind.TRANSACTION, transaction_id)

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"


class AccessOutcome(str, PyEnum):
    """
    Closed taxonomy of decision outcomes.

    Everything except GRANTED is a routine refusal the caller branches on.
    Storage failures are not part of it; they raise StorageError.
    """

    GRANTED = "granted"
    ACCESS_DENIED = "access_denied"
    INSUFFICIENT_ROLE = "insufficient_role"
    NOT_FOUND = "not_found"
    INVARIANT_VIOLATION = "invariant_violation"


# Reasons
ACCESS_GRANTED = "access granted"
ACCESS_DENIED = "access denied"
WRITE_ACCESS_REQUIRED = "write access required"
INSUFFICIENT_PRIVILEGE = "insufficient privilege"
LAST_ADMIN = "last admin"
LAST_MEMBER = "last member"


@dataclass(frozen=True)
class AccessDecision:
    """Result of a permission or invariant check: allowed plus a human-readable reason."""

    allowed: bool
    reason: str
    outcome: AccessOutcome

    @classmethod
    def grant(cls, reason: str = ACCESS_GRANTED) -> "AccessDecision":
        return cls(True, reason, AccessOutcome.GRANTED)

    @classmethod
    def access_denied(cls, reason: str = ACCESS_DENIED) -> "AccessDecision":
        return cls(False, reason, AccessOutcome.ACCESS_DENIED)

    @classmethod
    def insufficient_role(cls, reason: str) -> "AccessDecision":
        return cls(False, reason, AccessOutcome.INSUFFICIENT_ROLE)

    @classmethod
    def not_found(cls, reason: str = "not found") -> "AccessDecision":
        return cls(False, reason, AccessOutcome.NOT_FOUND)

    @classmethod
    def invariant_violation(cls, reason: str) -> "AccessDecision":
        return cls(False, reason, AccessOutcome.INVARIANT_VIOLATION)


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a guarded mutation.

    entity is the created/updated row when the decision is allowed, else None.
    """

    decision: AccessDecision
    entity: Any = None

    @property
    def allowed(self) -> bool:
        return self.decision.allowed

    @classmethod
    def ok(cls, entity: Any = None, reason: str = ACCESS_GRANTED) -> "OperationResult":
        return cls(AccessDecision.grant(reason), entity)

    @classmethod
    def refused(cls, decision: AccessDecision) -> "OperationResult":
        return cls(decision, None)
