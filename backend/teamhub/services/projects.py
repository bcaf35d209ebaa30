import logging
from typing import List, Optional

from teamhub.core.database import as_utc, utcnow
from teamhub.core.exceptions import ValidationError
from teamhub.models.project import Project
from teamhub.permissions import EntityRef, Kind, Operation, Requester, authorize, can_see_team
from teamhub.schemas.project import ProjectCreate, ProjectUpdate
from teamhub.services.users import require_requester

logger = logging.getLogger(__name__)


def _check_dates(start_date, end_date) -> None:
    if start_date and end_date and as_utc(end_date) < as_utc(start_date):
        raise ValidationError("End date cannot be before start date")


async def create_project(store, requester: Optional[Requester], project_in: ProjectCreate) -> Project:
    requester = require_requester(requester)
    _check_dates(project_in.start_date, project_in.end_date)
    chain = (
        await authorize(store, requester, Operation.CREATE, EntityRef.under(Kind.PROJECT, project_in.team_id))
    ).require()

    project = Project(
        name=project_in.name,
        description=project_in.description,
        team_id=chain.team.id,
        created_by_id=requester.id,
        start_date=as_utc(project_in.start_date) or utcnow(),
        end_date=as_utc(project_in.end_date),
        status=project_in.status.value,
    )
    project = await store.add(project)
    logger.info("User %s created project %s in team %s", requester.id, project.id, chain.team.id)
    return project


async def list_projects(store, requester: Optional[Requester], team_id: Optional[int] = None) -> List[Project]:
    """Projects of one team, or of every team the requester can see."""
    requester = require_requester(requester)
    if team_id is not None:
        # Listing a team's projects needs the same access as creating one there
        chain = (
            await authorize(store, requester, Operation.READ, EntityRef.under(Kind.PROJECT, team_id))
        ).require()
        return await store.projects_for_teams([chain.team.id])

    teams = await store.teams_for_user(requester.id)
    return await store.projects_for_teams(team.id for team in teams if can_see_team(requester, team))


async def get_project(store, requester: Optional[Requester], project_id: int) -> Project:
    requester = require_requester(requester)
    chain = (
        await authorize(store, requester, Operation.READ, EntityRef.existing(Kind.PROJECT, project_id))
    ).require()
    return chain.project


async def update_project(
    store, requester: Optional[Requester], project_id: int, project_in: ProjectUpdate
) -> Project:
    requester = require_requester(requester)
    chain = (
        await authorize(store, requester, Operation.UPDATE, EntityRef.existing(Kind.PROJECT, project_id))
    ).require()
    project = chain.project

    _check_dates(project_in.start_date or project.start_date, project_in.end_date or project.end_date)
    if project_in.name:
        project.name = project_in.name
    if project_in.description:
        project.description = project_in.description
    if project_in.start_date:
        project.start_date = as_utc(project_in.start_date)
    if project_in.end_date:
        project.end_date = as_utc(project_in.end_date)
    if project_in.status:
        project.status = project_in.status.value
    return await store.save(project)


async def delete_project(store, requester: Optional[Requester], project_id: int) -> None:
    requester = require_requester(requester)
    chain = (
        await authorize(store, requester, Operation.DELETE, EntityRef.existing(Kind.PROJECT, project_id))
    ).require()
    await store.delete(chain.project)
    logger.info("User %s deleted project %s", requester.id, project_id)
