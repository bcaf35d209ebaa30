"""Entity store: lookups and writes for users, teams, projects, tasks and comments."""
from typing import Iterable, List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.models.comment import Comment
from teamhub.models.project import Project
from teamhub.models.task import Task
from teamhub.models.team import Team
from teamhub.models.user import User
from teamhub.permissions import Kind

MODELS = {
    Kind.TEAM: Team,
    Kind.PROJECT: Project,
    Kind.TASK: Task,
    Kind.COMMENT: Comment,
}


class EntityStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, kind: Kind, entity_id: Optional[int]):
        if entity_id is None:
            return None
        return await self.session.get(MODELS[kind], entity_id)

    async def get_user(self, user_id: Optional[int]) -> Optional[User]:
        if user_id is None:
            return None
        return await self.session.get(User, user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def add(self, obj):
        self.session.add(obj)
        await self.session.commit()
        await self.session.refresh(obj)
        return obj

    async def save(self, obj):
        await self.session.commit()
        await self.session.refresh(obj)
        return obj

    async def delete(self, obj) -> None:
        # Owned rows go first; foreign keys are not enforced by every backend
        if isinstance(obj, Team):
            result = await self.session.execute(select(Project.id).where(Project.team_id == obj.id))
            project_ids = list(result.scalars().all())
            await self._delete_project_contents(project_ids)
            if project_ids:
                await self.session.execute(delete(Project).where(Project.id.in_(project_ids)))
        elif isinstance(obj, Project):
            await self._delete_project_contents([obj.id])
        elif isinstance(obj, Task):
            await self.session.execute(delete(Comment).where(Comment.task_id == obj.id))
        await self.session.delete(obj)
        await self.session.commit()

    async def _delete_project_contents(self, project_ids: List[int]) -> None:
        if not project_ids:
            return
        task_ids = select(Task.id).where(Task.project_id.in_(project_ids))
        await self.session.execute(delete(Comment).where(Comment.task_id.in_(task_ids)))
        await self.session.execute(delete(Task).where(Task.project_id.in_(project_ids)))

    async def teams_for_user(self, user_id: int) -> List[Team]:
        """Teams the user leads or belongs to."""
        result = await self.session.execute(
            select(Team)
            .where(or_(Team.leader_id == user_id, Team.members.any(User.id == user_id)))
            .order_by(Team.id)
        )
        return list(result.scalars().all())

    async def projects_for_teams(self, team_ids: Iterable[int]) -> List[Project]:
        team_ids = list(team_ids)
        if not team_ids:
            return []
        result = await self.session.execute(
            select(Project).where(Project.team_id.in_(team_ids)).order_by(Project.id)
        )
        return list(result.scalars().all())

    async def tasks_for_projects(
        self, project_ids: Iterable[int], assigned_to: Optional[int] = None
    ) -> List[Task]:
        project_ids = list(project_ids)
        if not project_ids:
            return []
        query = select(Task).where(Task.project_id.in_(project_ids))
        if assigned_to is not None:
            query = query.where(Task.assigned_to_id == assigned_to)
        result = await self.session.execute(query.order_by(Task.id))
        return list(result.scalars().all())

    async def upcoming_tasks(self, project_ids: Iterable[int], now, limit: int = 5) -> List[Task]:
        project_ids = list(project_ids)
        if not project_ids:
            return []
        result = await self.session.execute(
            select(Task)
            .where(
                Task.project_id.in_(project_ids),
                Task.due_date.is_not(None),
                Task.due_date >= now,
                Task.status != "completed",
            )
            .order_by(Task.due_date.asc(), Task.id)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def recently_completed_tasks(self, project_ids: Iterable[int], limit: int = 5) -> List[Task]:
        project_ids = list(project_ids)
        if not project_ids:
            return []
        result = await self.session.execute(
            select(Task)
            .where(Task.project_id.in_(project_ids), Task.status == "completed")
            .order_by(Task.updated_at.desc(), Task.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def comments_for_task(self, task_id: int) -> List[Comment]:
        result = await self.session.execute(
            select(Comment)
            .where(Comment.task_id == task_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        return list(result.scalars().all())
