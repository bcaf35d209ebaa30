"""Authorization engine.

Every read and mutation of a team, project, task or comment goes through
:func:`authorize`. It resolves the ownership chain of the target
(comment -> task -> project -> team), then evaluates the rule registered for
``(kind, operation)`` in :data:`POLICY`. Decisions are plain values; callers
turn a non-allow decision into an exception with :meth:`Decision.require`.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, NamedTuple, Optional, Tuple

from teamhub.core.exceptions import NotFoundError, PermissionDenied, Unauthenticated as UnauthenticatedError

logger = logging.getLogger(__name__)


class Kind(str, Enum):
    TEAM = "team"
    PROJECT = "project"
    TASK = "task"
    COMMENT = "comment"


class Operation(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


ADMIN_ROLE = "admin"

# child kind -> (parent kind, attribute holding the parent id)
PARENTS = {
    Kind.COMMENT: (Kind.TASK, "task_id"),
    Kind.TASK: (Kind.PROJECT, "project_id"),
    Kind.PROJECT: (Kind.TEAM, "team_id"),
}


def not_found_message(kind: Kind) -> str:
    return f"{kind.value.capitalize()} not found"


def missing_message(kind: Kind) -> str:
    return f"{kind.value.capitalize()} does not exist"


@dataclass(frozen=True)
class Requester:
    """Identity of the user a request is made on behalf of."""

    id: int
    role: str = "user"

    @classmethod
    def from_user(cls, user) -> "Requester":
        return cls(id=user.id, role=user.role)


@dataclass(frozen=True)
class EntityRef:
    """Target of an operation.

    Existing entities are addressed by ``id``. Creation, and reads of a
    collection (e.g. the comments of a task), are addressed by ``parent_id``.
    """

    kind: Kind
    id: Optional[int] = None
    parent_id: Optional[int] = None

    @classmethod
    def existing(cls, kind: Kind, entity_id: int) -> "EntityRef":
        return cls(kind=kind, id=entity_id)

    @classmethod
    def under(cls, kind: Kind, parent_id: int) -> "EntityRef":
        return cls(kind=kind, parent_id=parent_id)


@dataclass
class Chain:
    team: object = None
    project: object = None
    task: object = None
    comment: object = None

    def leaf(self, kind: Kind):
        return getattr(self, kind.value)


# -- decisions ---------------------------------------------------------------

class Decision:
    allowed = False

    def require(self) -> Chain:
        raise NotImplementedError


@dataclass(frozen=True)
class Allow(Decision):
    chain: Chain = field(default=None, compare=False, repr=False)

    allowed = True

    def require(self) -> Chain:
        return self.chain


@dataclass(frozen=True)
class Deny(Decision):
    reason: str

    def require(self) -> Chain:
        raise PermissionDenied(self.reason)


@dataclass(frozen=True)
class NotFound(Decision):
    kind: Kind
    message: str
    integrity: bool = False

    def require(self) -> Chain:
        raise NotFoundError(self.kind.value, self.message, integrity=self.integrity)


@dataclass(frozen=True)
class Unauthenticated(Decision):
    message: str = "Not authenticated"

    def require(self) -> Chain:
        raise UnauthenticatedError(self.message)


# -- role predicates ---------------------------------------------------------

def is_admin(user) -> bool:
    return user.role == ADMIN_ROLE


def is_team_leader(user, team) -> bool:
    return team is not None and team.leader_id == user.id


def is_team_member(user, team) -> bool:
    # Checked against the member list alone, the leader is not assumed to be in it
    if team is None:
        return False
    return user.id in team.member_ids


def can_see_team(user, team) -> bool:
    """Team visibility: the requester leads the team or belongs to it."""
    return is_team_leader(user, team) or is_team_member(user, team)


def is_resource_creator(user, resource) -> bool:
    if resource is None:
        return False
    owner_id = getattr(resource, "created_by_id", None)
    if owner_id is None:
        # comments record their author as ``user_id``
        owner_id = getattr(resource, "user_id", None)
    return owner_id is not None and owner_id == user.id


def is_assignee(user, task) -> bool:
    return task is not None and task.assigned_to_id is not None and task.assigned_to_id == user.id


# -- policy table ------------------------------------------------------------

Check = Callable[[Requester, Chain, Kind], bool]


class Rule(NamedTuple):
    allowed_if: Tuple[Check, ...]
    reason: str


def _anyone(requester, chain, kind):
    return True


def _admin(requester, chain, kind):
    return is_admin(requester)


def _leader(requester, chain, kind):
    return is_team_leader(requester, chain.team)


def _member(requester, chain, kind):
    return is_team_member(requester, chain.team)


def _visible(requester, chain, kind):
    return can_see_team(requester, chain.team)


def _creator(requester, chain, kind):
    return is_resource_creator(requester, chain.leaf(kind))


def _assignee(requester, chain, kind):
    return is_assignee(requester, chain.task)


_TEAM_SCOPE = (_member, _leader, _admin)

POLICY: Dict[Tuple[Kind, Operation], Rule] = {
    (Kind.TEAM, Operation.CREATE): Rule((_anyone,), "Not authorized"),
    (Kind.TEAM, Operation.READ): Rule((_visible, _admin), "No access to this team"),
    (Kind.TEAM, Operation.UPDATE): Rule((_leader, _admin), "Only the team leader can edit the team"),
    (Kind.TEAM, Operation.DELETE): Rule((_leader, _admin), "Only the team leader can delete the team"),

    (Kind.PROJECT, Operation.CREATE): Rule(_TEAM_SCOPE, "No permission for this team"),
    (Kind.PROJECT, Operation.READ): Rule(_TEAM_SCOPE, "No permission for this project"),
    (Kind.PROJECT, Operation.UPDATE): Rule(
        (_leader, _creator, _admin),
        "Only the team leader or the project creator can edit the project",
    ),
    (Kind.PROJECT, Operation.DELETE): Rule(
        (_leader, _creator, _admin),
        "Only the team leader or the project creator can delete the project",
    ),

    (Kind.TASK, Operation.CREATE): Rule(_TEAM_SCOPE, "No permission for this project"),
    (Kind.TASK, Operation.READ): Rule(_TEAM_SCOPE, "No permission for this task"),
    (Kind.TASK, Operation.UPDATE): Rule(
        (_leader, _creator, _assignee, _admin),
        "No permission to edit this task",
    ),
    # The assignee may edit a task but not delete it
    (Kind.TASK, Operation.DELETE): Rule(
        (_leader, _creator, _admin),
        "Only the team leader or the task creator can delete the task",
    ),

    (Kind.COMMENT, Operation.CREATE): Rule(
        _TEAM_SCOPE, "No permission to comment on tasks in this team"
    ),
    (Kind.COMMENT, Operation.READ): Rule(
        _TEAM_SCOPE, "No permission to view comments in this team"
    ),
    (Kind.COMMENT, Operation.UPDATE): Rule(
        (_creator, _admin), "You do not have permission to edit this comment"
    ),
    (Kind.COMMENT, Operation.DELETE): Rule(
        (_creator, _leader, _admin), "You do not have permission to delete this comment"
    ),
}

MEMBER_ADD_RULE = Rule((_leader, _admin), "Only the team leader can add members")
MEMBER_REMOVE_RULE = Rule((_leader, _admin), "Only the team leader can remove members")
LEADER_REMOVAL_REASON = "Team leader cannot be removed from the team"


def _apply(rule: Rule, requester: Requester, kind: Kind, chain: Chain, operation: str) -> Decision:
    if any(check(requester, chain, kind) for check in rule.allowed_if):
        return Allow(chain)
    logger.info("Denied %s on %s for user %s: %s", operation, kind.value, requester.id, rule.reason)
    return Deny(rule.reason)


def evaluate(requester: Requester, operation: Operation, kind: Kind, chain: Chain) -> Decision:
    """Apply the policy table to an already resolved chain."""
    return _apply(POLICY[(kind, operation)], requester, kind, chain, operation.value)


# -- chain resolution --------------------------------------------------------

async def resolve_chain(store, kind: Kind, entity_id: int) -> Chain:
    """Load ``entity_id`` of ``kind`` and every owner above it up to the team.

    Raises NotFoundError for the requested kind if the entity itself is
    absent, and an integrity NotFoundError naming the parent kind if a link
    further up the chain is missing.
    """
    entity = await store.get(kind, entity_id)
    if entity is None:
        raise NotFoundError(kind.value, not_found_message(kind))
    chain = Chain()
    setattr(chain, kind.value, entity)
    await _walk_up(store, chain, kind, entity)
    return chain


async def resolve_parent_chain(store, parent_kind: Kind, parent_id: int) -> Chain:
    """Resolve the chain a new child of ``parent_kind`` would belong to."""
    parent = await store.get(parent_kind, parent_id)
    if parent is None:
        raise NotFoundError(parent_kind.value, missing_message(parent_kind))
    chain = Chain()
    setattr(chain, parent_kind.value, parent)
    await _walk_up(store, chain, parent_kind, parent)
    return chain


async def _walk_up(store, chain: Chain, kind: Kind, entity) -> None:
    while kind in PARENTS:
        parent_kind, attribute = PARENTS[kind]
        parent = await store.get(parent_kind, getattr(entity, attribute))
        if parent is None:
            logger.warning(
                "Broken ownership chain: %s %s references missing %s",
                kind.value, entity.id, parent_kind.value,
            )
            raise NotFoundError(parent_kind.value, missing_message(parent_kind), integrity=True)
        setattr(chain, parent_kind.value, parent)
        kind, entity = parent_kind, parent


# -- entry points ------------------------------------------------------------

async def authorize(store, requester: Optional[Requester], operation: Operation, target: EntityRef) -> Decision:
    if target.id is None and target.parent_id is not None and target.kind not in PARENTS:
        raise ValueError(f"{target.kind.value} has no parent kind to be created under")
    if requester is None:
        return Unauthenticated()
    try:
        if target.id is not None:
            chain = await resolve_chain(store, target.kind, target.id)
        elif target.parent_id is not None:
            parent_kind, _ = PARENTS[target.kind]
            chain = await resolve_parent_chain(store, parent_kind, target.parent_id)
        else:
            chain = Chain()
    except NotFoundError as exc:
        return NotFound(Kind(exc.kind), exc.message, exc.integrity)
    return evaluate(requester, operation, target.kind, chain)


def authorize_membership_change(
    requester: Optional[Requester], team, member_id: int, removing: bool
) -> Decision:
    """Gate adding or removing ``member_id`` on an already loaded team.

    Removing the leader is refused after the role gate, for every role.
    """
    if requester is None:
        return Unauthenticated()
    rule = MEMBER_REMOVE_RULE if removing else MEMBER_ADD_RULE
    decision = _apply(rule, requester, Kind.TEAM, Chain(team=team), "member change")
    if decision.allowed and removing and member_id == team.leader_id:
        logger.info("Refused removal of leader %s from team %s", member_id, team.id)
        return Deny(LEADER_REMOVAL_REASON)
    return decision
