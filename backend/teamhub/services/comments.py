import logging
from typing import List, Optional

from teamhub.models.comment import Comment
from teamhub.permissions import EntityRef, Kind, Operation, Requester, authorize
from teamhub.schemas.comment import CommentCreate, CommentUpdate
from teamhub.services.users import require_requester

logger = logging.getLogger(__name__)


async def create_comment(store, requester: Optional[Requester], comment_in: CommentCreate) -> Comment:
    requester = require_requester(requester)
    chain = (
        await authorize(store, requester, Operation.CREATE, EntityRef.under(Kind.COMMENT, comment_in.task_id))
    ).require()

    comment = Comment(text=comment_in.text, task_id=chain.task.id, user_id=requester.id)
    comment = await store.add(comment)
    logger.info("User %s commented on task %s", requester.id, chain.task.id)
    return comment


async def list_task_comments(store, requester: Optional[Requester], task_id: int) -> List[Comment]:
    """Comments of a task, newest first."""
    requester = require_requester(requester)
    chain = (
        await authorize(store, requester, Operation.READ, EntityRef.under(Kind.COMMENT, task_id))
    ).require()
    return await store.comments_for_task(chain.task.id)


async def get_comment(store, requester: Optional[Requester], comment_id: int) -> Comment:
    requester = require_requester(requester)
    chain = (
        await authorize(store, requester, Operation.READ, EntityRef.existing(Kind.COMMENT, comment_id))
    ).require()
    return chain.comment


async def update_comment(
    store, requester: Optional[Requester], comment_id: int, comment_in: CommentUpdate
) -> Comment:
    requester = require_requester(requester)
    chain = (
        await authorize(store, requester, Operation.UPDATE, EntityRef.existing(Kind.COMMENT, comment_id))
    ).require()
    comment = chain.comment

    if comment_in.text:
        comment.text = comment_in.text
    return await store.save(comment)


async def delete_comment(store, requester: Optional[Requester], comment_id: int) -> None:
    requester = require_requester(requester)
    chain = (
        await authorize(store, requester, Operation.DELETE, EntityRef.existing(Kind.COMMENT, comment_id))
    ).require()
    await store.delete(chain.comment)
    logger.info("User %s deleted comment %s", requester.id, comment_id)
