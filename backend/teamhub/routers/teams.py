from typing import List

from fastapi import APIRouter, status

from teamhub.routers.deps import CurrentRequester, Store
from teamhub.schemas.team import MemberAdd, TeamCreate, TeamResponse, TeamUpdate
from teamhub.services import teams

router = APIRouter(
    prefix="/api/teams",
    tags=["teams"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
async def create_team(team_in: TeamCreate, requester: CurrentRequester, store: Store):
    return await teams.create_team(store, requester, team_in)


@router.get("", response_model=List[TeamResponse])
async def get_teams(requester: CurrentRequester, store: Store):
    """Teams the current user leads or belongs to"""
    return await teams.list_teams(store, requester)


@router.get("/{team_id}", response_model=TeamResponse)
async def get_team(team_id: int, requester: CurrentRequester, store: Store):
    return await teams.get_team(store, requester, team_id)


@router.put("/{team_id}", response_model=TeamResponse)
async def update_team(team_id: int, team_in: TeamUpdate, requester: CurrentRequester, store: Store):
    return await teams.update_team(store, requester, team_id, team_in)


@router.delete("/{team_id}")
async def delete_team(team_id: int, requester: CurrentRequester, store: Store):
    await teams.delete_team(store, requester, team_id)
    return {"message": "Team deleted"}


@router.post("/{team_id}/members", response_model=TeamResponse)
async def add_team_member(team_id: int, member_in: MemberAdd, requester: CurrentRequester, store: Store):
    return await teams.add_member(store, requester, team_id, member_in)


@router.delete("/{team_id}/members/{user_id}", response_model=TeamResponse)
async def remove_team_member(team_id: int, user_id: int, requester: CurrentRequester, store: Store):
    return await teams.remove_member(store, requester, team_id, user_id)
