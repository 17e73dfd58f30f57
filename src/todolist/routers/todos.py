from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from ..repositories import TodoService
from ..runtime import TodoRuntime
from ..schemas import TodoCreate, TodoOut, TodoUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)

_BACKEND_ERROR = {503: {"description": "Persistence service unavailable"}}


def _get_runtime(request: Request) -> TodoRuntime:
    return request.app.state.runtime


def _get_store(runtime: TodoRuntime = Depends(_get_runtime)) -> TodoService:
    """
    Dependency wrapper for the store to keep signatures clean.
    """
    return runtime.store


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="Return every Todo item. Order is not guaranteed.",
    responses=_BACKEND_ERROR,
)
def list_todos(store: TodoService = Depends(_get_store)) -> List[TodoOut]:
    return [TodoOut.from_todo(t) for t in store.get_all()]


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={
        200: {"description": "Todo found"},
        404: {"description": "Todo not found"},
        **_BACKEND_ERROR,
    },
)
def get_todo(todo_id: int, store: TodoService = Depends(_get_store)) -> TodoOut:
    """
    Retrieve a single Todo item by its ID.
    """
    item = store.get_one(todo_id)
    if item is None:
        raise _not_found()
    return TodoOut.from_todo(item)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description=(
        "Create a Todo item. An omitted or zero id is assigned by the service; "
        "a supplied id replaces any item stored under it."
    ),
    responses={
        201: {"description": "Todo created successfully"},
        400: {"description": "Validation error"},
        **_BACKEND_ERROR,
    },
)
def create_todo(
    payload: TodoCreate,
    request: Request,
    runtime: TodoRuntime = Depends(_get_runtime),
) -> TodoOut:
    """
    Create a new Todo. Its url points at the new item below this collection.
    """
    todo = runtime.wrap(payload.to_todo(), str(request.url.replace(query="")))
    runtime.store.insert(todo)
    logger.debug("Created todo %d", todo.id)
    return TodoOut.from_todo(todo)


# PUBLIC_INTERFACE
@router.patch(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description="Partially update a Todo item. Only title and completed are taken from the body.",
    responses={
        200: {"description": "Todo updated"},
        404: {"description": "Todo not found"},
        **_BACKEND_ERROR,
    },
)
def patch_todo(todo_id: int, payload: TodoUpdate, store: TodoService = Depends(_get_store)) -> TodoOut:
    """
    Partial update of a Todo item.
    """
    updated = store.update(todo_id, payload.to_patch())
    if updated is None:
        raise _not_found()
    return TodoOut.from_todo(updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Todo",
    description="Delete a Todo item by ID. Deleting an unknown ID also succeeds.",
    responses={
        204: {"description": "Todo deleted or already absent"},
        **_BACKEND_ERROR,
    },
)
def delete_todo(todo_id: int, store: TodoService = Depends(_get_store)) -> Response:
    """
    Delete a Todo. Returns 204 whether or not it existed.
    """
    if not store.delete(todo_id):
        logger.debug("Delete of unknown todo %d ignored", todo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# PUBLIC_INTERFACE
@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete all Todos",
    description="Remove every Todo item.",
    responses={
        204: {"description": "All todos deleted"},
        **_BACKEND_ERROR,
    },
)
def delete_all_todos(store: TodoService = Depends(_get_store)) -> Response:
    store.delete_all()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
