from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from usersapi.models.user import NewUser, User
from usersapi.offload import run_blocking
from web.deps import user_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users")


@router.post("", response_model=User)
async def create_user(new_user: NewUser) -> User:
    logger.info("POST /users: creating user username=%s", new_user.username)
    async with user_repository() as repo:
        user = await run_blocking(repo.create, new_user)
    logger.info("User created: id=%d", user.id)
    return user


@router.get("/{user_id}", response_model=User)
async def get_user(user_id: int) -> User:
    logger.info("GET /users/%d", user_id)
    async with user_repository() as repo:
        return await run_blocking(repo.get_by_id, user_id)


# A missing row on read or update surfaces as a 500 like any other query
# failure; only delete answers 404.
@router.put("/{user_id}", response_model=User)
async def update_user(user_id: int, updated_user: NewUser) -> User:
    logger.info("PUT /users/%d: updating user", user_id)
    async with user_repository() as repo:
        user = await run_blocking(repo.update, user_id, updated_user)
    logger.info("User updated: id=%d", user.id)
    return user


@router.delete("/{user_id}")
async def delete_user(user_id: int) -> PlainTextResponse:
    logger.info("DELETE /users/%d", user_id)
    async with user_repository() as repo:
        deleted = await run_blocking(repo.delete, user_id)
    if deleted > 0:
        logger.info("User deleted: id=%d", user_id)
        return PlainTextResponse("User deleted successfully")
    logger.warning("User not found for delete: id=%d", user_id)
    return PlainTextResponse("User not found", status_code=404)
