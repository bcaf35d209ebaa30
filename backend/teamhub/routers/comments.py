from typing import List

from fastapi import APIRouter, status

from teamhub.routers.deps import CurrentRequester, Store
from teamhub.schemas.comment import CommentCreate, CommentResponse, CommentUpdate
from teamhub.services import comments

router = APIRouter(
    prefix="/api/comments",
    tags=["comments"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(comment_in: CommentCreate, requester: CurrentRequester, store: Store):
    return await comments.create_comment(store, requester, comment_in)


@router.get("/task/{task_id}", response_model=List[CommentResponse])
async def get_task_comments(task_id: int, requester: CurrentRequester, store: Store):
    return await comments.list_task_comments(store, requester, task_id)


@router.get("/{comment_id}", response_model=CommentResponse)
async def get_comment(comment_id: int, requester: CurrentRequester, store: Store):
    return await comments.get_comment(store, requester, comment_id)


@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int, comment_in: CommentUpdate, requester: CurrentRequester, store: Store
):
    return await comments.update_comment(store, requester, comment_id, comment_in)


@router.delete("/{comment_id}")
async def delete_comment(comment_id: int, requester: CurrentRequester, store: Store):
    await comments.delete_comment(store, requester, comment_id)
    return {"message": "Comment deleted"}
