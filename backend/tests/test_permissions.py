import pytest

from conftest import FakeStore
from teamhub.core.exceptions import NotFoundError, PermissionDenied
from teamhub.core.exceptions import Unauthenticated as UnauthenticatedError
from teamhub.models.comment import Comment
from teamhub.models.project import Project
from teamhub.models.task import Task
from teamhub.models.team import Team
from teamhub.models.user import User
from teamhub.permissions import (
    LEADER_REMOVAL_REASON,
    Allow,
    Chain,
    Deny,
    EntityRef,
    Kind,
    NotFound,
    Operation,
    Requester,
    Unauthenticated,
    authorize,
    authorize_membership_change,
    can_see_team,
    evaluate,
    is_admin,
    is_assignee,
    is_resource_creator,
    is_team_leader,
    is_team_member,
    resolve_chain,
)

LEADER = Requester(id=1)
MEMBER = Requester(id=2)
OTHER_MEMBER = Requester(id=3)
OUTSIDER = Requester(id=4)
ADMIN = Requester(id=5, role="admin")
AUTHOR = Requester(id=6)


def _user(requester):
    return User(id=requester.id, name=f"user{requester.id}", last_name="x", email=f"u{requester.id}@example.com",
                hashed_password="x", role=requester.role)


@pytest.fixture
def world():
    members = [_user(r) for r in (LEADER, MEMBER, OTHER_MEMBER, AUTHOR)]
    team = Team(id=10, name="Core", leader_id=LEADER.id, members=members)
    project = Project(id=20, name="Backend", team_id=team.id, created_by_id=MEMBER.id, status="planned")
    task = Task(id=30, title="Write docs", project_id=project.id, created_by_id=MEMBER.id,
                assigned_to_id=OTHER_MEMBER.id, priority="medium", status="todo")
    comment = Comment(id=40, text="Looks good", task_id=task.id, user_id=AUTHOR.id)
    store = FakeStore(team, project, task, comment)
    return store, team, project, task, comment


# -- predicates --------------------------------------------------------------

def test_is_admin():
    assert is_admin(ADMIN)
    assert not is_admin(LEADER)


def test_leader_and_member_predicates(world):
    _, team, _, _, _ = world
    assert is_team_leader(LEADER, team)
    assert not is_team_leader(MEMBER, team)
    assert is_team_member(MEMBER, team)
    assert not is_team_member(OUTSIDER, team)


def test_leader_missing_from_members_is_not_a_member():
    team = Team(id=1, name="Odd", leader_id=LEADER.id, members=[_user(MEMBER)])
    assert is_team_leader(LEADER, team)
    assert not is_team_member(LEADER, team)
    assert can_see_team(LEADER, team)


def test_creator_predicate_covers_comment_author(world):
    _, _, project, task, comment = world
    assert is_resource_creator(MEMBER, project)
    assert is_resource_creator(MEMBER, task)
    assert is_resource_creator(AUTHOR, comment)
    assert not is_resource_creator(LEADER, comment)
    assert not is_resource_creator(LEADER, None)


def test_assignee_predicate(world):
    _, _, _, task, _ = world
    assert is_assignee(OTHER_MEMBER, task)
    assert not is_assignee(MEMBER, task)
    task.assigned_to_id = None
    assert not is_assignee(OTHER_MEMBER, task)


# -- chain resolution --------------------------------------------------------

async def test_resolve_chain_walks_up_to_team(world):
    store, team, project, task, comment = world
    chain = await resolve_chain(store, Kind.COMMENT, comment.id)
    assert chain.comment is comment
    assert chain.task is task
    assert chain.project is project
    assert chain.team is team


async def test_resolve_chain_reports_missing_target(world):
    store = world[0]
    with pytest.raises(NotFoundError) as exc_info:
        await resolve_chain(store, Kind.TASK, 999)
    assert exc_info.value.kind == "task"
    assert exc_info.value.message == "Task not found"
    assert not exc_info.value.integrity


async def test_resolve_chain_reports_missing_intermediate(world):
    store, _, project, task, _ = world
    store.remove(project)
    with pytest.raises(NotFoundError) as exc_info:
        await resolve_chain(store, Kind.COMMENT, 40)
    assert exc_info.value.kind == "project"
    assert exc_info.value.message == "Project does not exist"
    assert exc_info.value.integrity


# -- authorize ---------------------------------------------------------------

async def test_missing_requester_is_unauthenticated(world):
    store = world[0]
    decision = await authorize(store, None, Operation.READ, EntityRef.existing(Kind.TEAM, 10))
    assert decision == Unauthenticated()
    with pytest.raises(UnauthenticatedError):
        decision.require()


async def test_missing_target_is_not_found(world):
    store = world[0]
    decision = await authorize(store, ADMIN, Operation.DELETE, EntityRef.existing(Kind.PROJECT, 404))
    assert isinstance(decision, NotFound)
    assert decision.kind is Kind.PROJECT
    with pytest.raises(NotFoundError):
        decision.require()


async def test_create_under_missing_parent_names_the_parent(world):
    store = world[0]
    decision = await authorize(store, LEADER, Operation.CREATE, EntityRef.under(Kind.TASK, 404))
    assert decision == NotFound(Kind.PROJECT, "Project does not exist")


async def test_anyone_authenticated_may_create_a_team(world):
    store = world[0]
    decision = await authorize(store, OUTSIDER, Operation.CREATE, EntityRef(Kind.TEAM))
    assert decision.allowed


@pytest.mark.parametrize(
    "requester, allowed",
    [(LEADER, True), (MEMBER, True), (ADMIN, True), (OUTSIDER, False)],
)
async def test_team_read(world, requester, allowed):
    store = world[0]
    decision = await authorize(store, requester, Operation.READ, EntityRef.existing(Kind.TEAM, 10))
    assert decision.allowed is allowed


@pytest.mark.parametrize("operation", [Operation.UPDATE, Operation.DELETE])
@pytest.mark.parametrize(
    "requester, allowed",
    [(LEADER, True), (ADMIN, True), (MEMBER, False), (OUTSIDER, False)],
)
async def test_team_mutation_needs_leader_or_admin(world, operation, requester, allowed):
    store = world[0]
    decision = await authorize(store, requester, operation, EntityRef.existing(Kind.TEAM, 10))
    assert decision.allowed is allowed


@pytest.mark.parametrize(
    "requester, allowed",
    [(LEADER, True), (MEMBER, True), (OTHER_MEMBER, False), (ADMIN, True), (OUTSIDER, False)],
)
async def test_project_update(world, requester, allowed):
    store = world[0]
    decision = await authorize(store, requester, Operation.UPDATE, EntityRef.existing(Kind.PROJECT, 20))
    assert decision.allowed is allowed


async def test_outsider_cannot_read_project(world):
    store = world[0]
    decision = await authorize(store, OUTSIDER, Operation.READ, EntityRef.existing(Kind.PROJECT, 20))
    assert decision == Deny("No permission for this project")
    with pytest.raises(PermissionDenied) as exc_info:
        decision.require()
    assert exc_info.value.message == "No permission for this project"


async def test_task_assignee_may_update_but_not_delete(world):
    store = world[0]
    target = EntityRef.existing(Kind.TASK, 30)
    assert (await authorize(store, OTHER_MEMBER, Operation.UPDATE, target)).allowed
    decision = await authorize(store, OTHER_MEMBER, Operation.DELETE, target)
    assert isinstance(decision, Deny)


@pytest.mark.parametrize(
    "requester, allowed",
    [(LEADER, True), (MEMBER, True), (ADMIN, True), (AUTHOR, False), (OUTSIDER, False)],
)
async def test_task_delete(world, requester, allowed):
    store = world[0]
    decision = await authorize(store, requester, Operation.DELETE, EntityRef.existing(Kind.TASK, 30))
    assert decision.allowed is allowed


@pytest.mark.parametrize(
    "requester, update_allowed, delete_allowed",
    [
        (AUTHOR, True, True),
        (LEADER, False, True),
        (ADMIN, True, True),
        (MEMBER, False, False),
        (OUTSIDER, False, False),
    ],
)
async def test_comment_update_and_delete(world, requester, update_allowed, delete_allowed):
    store = world[0]
    target = EntityRef.existing(Kind.COMMENT, 40)
    assert (await authorize(store, requester, Operation.UPDATE, target)).allowed is update_allowed
    assert (await authorize(store, requester, Operation.DELETE, target)).allowed is delete_allowed


async def test_comment_listing_is_scoped_to_team(world):
    store = world[0]
    target = EntityRef.under(Kind.COMMENT, 30)
    assert (await authorize(store, MEMBER, Operation.READ, target)).allowed
    assert not (await authorize(store, OUTSIDER, Operation.READ, target)).allowed


@pytest.mark.parametrize(
    "target",
    [EntityRef.under(Kind.PROJECT, 10), EntityRef.under(Kind.TASK, 20), EntityRef.under(Kind.COMMENT, 30)],
    ids=["project-in-team", "task-in-project", "comment-on-task"],
)
@pytest.mark.parametrize(
    "requester, allowed",
    [(LEADER, True), (MEMBER, True), (ADMIN, True), (OUTSIDER, False)],
)
async def test_create_under_parent_needs_team_scope(world, target, requester, allowed):
    store, team = world[0], world[1]
    decision = await authorize(store, requester, Operation.CREATE, target)
    assert decision.allowed is allowed
    if allowed:
        assert decision.chain.team is team
    else:
        assert isinstance(decision, Deny)
        with pytest.raises(PermissionDenied):
            decision.require()


@pytest.mark.parametrize(
    "requester, allowed",
    [(LEADER, True), (MEMBER, True), (ADMIN, True), (OTHER_MEMBER, False), (OUTSIDER, False)],
)
async def test_project_delete(world, requester, allowed):
    # MEMBER created the project without leading the team
    store = world[0]
    decision = await authorize(store, requester, Operation.DELETE, EntityRef.existing(Kind.PROJECT, 20))
    assert decision.allowed is allowed


async def test_team_cannot_be_addressed_under_a_parent(world):
    store = world[0]
    with pytest.raises(ValueError, match="team"):
        await authorize(store, LEADER, Operation.CREATE, EntityRef.under(Kind.TEAM, 10))


async def test_authorize_is_idempotent(world):
    store = world[0]
    for requester in (LEADER, MEMBER, OUTSIDER, ADMIN):
        for operation in Operation:
            target = EntityRef.existing(Kind.TASK, 30)
            first = await authorize(store, requester, operation, target)
            second = await authorize(store, requester, operation, target)
            assert first == second


async def test_allow_carries_resolved_chain(world):
    store, team, project, task, _ = world
    decision = await authorize(store, LEADER, Operation.READ, EntityRef.existing(Kind.TASK, 30))
    assert decision == Allow()
    chain = decision.require()
    assert (chain.team, chain.project, chain.task) == (team, project, task)


def test_evaluate_on_resolved_chain(world):
    _, team, project, task, _ = world
    chain = Chain(team=team, project=project, task=task)
    assert evaluate(LEADER, Operation.DELETE, Kind.TASK, chain).allowed
    assert not evaluate(OUTSIDER, Operation.READ, Kind.TASK, chain).allowed


def test_task_permissions_imply_a_role(world):
    _, team, project, task, _ = world
    chain = Chain(team=team, project=project, task=task)
    for requester in (LEADER, MEMBER, OTHER_MEMBER, OUTSIDER, ADMIN, AUTHOR):
        if evaluate(requester, Operation.DELETE, Kind.TASK, chain).allowed:
            assert is_team_leader(requester, team) or is_resource_creator(requester, task) or is_admin(requester)
        if evaluate(requester, Operation.UPDATE, Kind.TASK, chain).allowed:
            assert (
                is_team_leader(requester, team)
                or is_resource_creator(requester, task)
                or is_assignee(requester, task)
                or is_admin(requester)
            )


# -- membership changes ------------------------------------------------------

def test_membership_change_needs_leader_or_admin(world):
    team = world[1]
    assert authorize_membership_change(LEADER, team, OUTSIDER.id, removing=False).allowed
    assert authorize_membership_change(ADMIN, team, MEMBER.id, removing=True).allowed
    assert not authorize_membership_change(MEMBER, team, OTHER_MEMBER.id, removing=True).allowed
    assert authorize_membership_change(None, team, MEMBER.id, removing=True) == Unauthenticated()


@pytest.mark.parametrize("requester", [LEADER, ADMIN, MEMBER])
def test_leader_can_never_be_removed(world, requester):
    team = world[1]
    decision = authorize_membership_change(requester, team, LEADER.id, removing=True)
    assert isinstance(decision, Deny)


def test_leader_guard_applies_after_admin_passes_role_gate(world):
    team = world[1]
    decision = authorize_membership_change(ADMIN, team, LEADER.id, removing=True)
    assert decision == Deny(LEADER_REMOVAL_REASON)
    # The role gate itself still lets the admin through for other members
    assert authorize_membership_change(ADMIN, team, MEMBER.id, removing=True).allowed
