import logging
from typing import List, Optional

from teamhub.core.exceptions import NotFoundError, ValidationError
from teamhub.models.team import Team
from teamhub.permissions import (
    EntityRef,
    Kind,
    Operation,
    Requester,
    authorize,
    authorize_membership_change,
    can_see_team,
)
from teamhub.schemas.team import MemberAdd, TeamCreate, TeamUpdate
from teamhub.services.users import require_requester

logger = logging.getLogger(__name__)


async def create_team(store, requester: Optional[Requester], team_in: TeamCreate) -> Team:
    requester = require_requester(requester)
    (await authorize(store, requester, Operation.CREATE, EntityRef(Kind.TEAM))).require()

    leader = await store.get_user(requester.id)
    if leader is None:
        raise NotFoundError("user", "User not found")

    # The creator leads the team and is its first member
    team = Team(
        name=team_in.name,
        description=team_in.description,
        leader_id=leader.id,
        members=[leader],
    )
    team = await store.add(team)
    logger.info("User %s created team %s", requester.id, team.id)
    return team


async def list_teams(store, requester: Optional[Requester]) -> List[Team]:
    requester = require_requester(requester)
    teams = await store.teams_for_user(requester.id)
    return [team for team in teams if can_see_team(requester, team)]


async def get_team(store, requester: Optional[Requester], team_id: int) -> Team:
    requester = require_requester(requester)
    chain = (await authorize(store, requester, Operation.READ, EntityRef.existing(Kind.TEAM, team_id))).require()
    return chain.team


async def update_team(store, requester: Optional[Requester], team_id: int, team_in: TeamUpdate) -> Team:
    requester = require_requester(requester)
    chain = (await authorize(store, requester, Operation.UPDATE, EntityRef.existing(Kind.TEAM, team_id))).require()
    team = chain.team

    if team_in.name:
        team.name = team_in.name
    if team_in.description:
        team.description = team_in.description
    return await store.save(team)


async def add_member(store, requester: Optional[Requester], team_id: int, member_in: MemberAdd) -> Team:
    requester = require_requester(requester)
    team = await store.get(Kind.TEAM, team_id)
    if team is None:
        raise NotFoundError("team", "Team not found")

    if member_in.user_id is not None:
        user = await store.get_user(member_in.user_id)
    else:
        user = await store.get_user_by_email(member_in.email)
    if user is None:
        raise NotFoundError("user", "User not found")

    authorize_membership_change(requester, team, user.id, removing=False).require()

    if any(member.id == user.id for member in team.members):
        raise ValidationError("User is already a team member")

    team.members.append(user)
    team = await store.save(team)
    logger.info("User %s added member %s to team %s", requester.id, user.id, team.id)
    return team


async def remove_member(store, requester: Optional[Requester], team_id: int, user_id: int) -> Team:
    requester = require_requester(requester)
    team = await store.get(Kind.TEAM, team_id)
    if team is None:
        raise NotFoundError("team", "Team not found")

    authorize_membership_change(requester, team, user_id, removing=True).require()

    team.members = [member for member in team.members if member.id != user_id]
    team = await store.save(team)
    logger.info("User %s removed member %s from team %s", requester.id, user_id, team.id)
    return team


async def delete_team(store, requester: Optional[Requester], team_id: int) -> None:
    requester = require_requester(requester)
    chain = (await authorize(store, requester, Operation.DELETE, EntityRef.existing(Kind.TEAM, team_id))).require()
    await store.delete(chain.team)
    logger.info("User %s deleted team %s", requester.id, team_id)
