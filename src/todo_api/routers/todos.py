from __future__ import annotations

from bson import ObjectId
from fastapi import APIRouter, Depends, Request, status

from ..db import parse_identifier
from ..repositories import TodoRepository, to_out
from ..schemas import ErrorBody, TodoCreated, TodoDeleted, TodoList, TodoRequest, TodoUpdated

router = APIRouter(
    prefix="/todo",
    tags=["todos"],
)

_BAD_REQUEST = {400: {"model": ErrorBody, "description": "Invalid id or payload"}}
_STORE_FAILURE = {500: {"model": ErrorBody, "description": "Document store failure"}}


# PUBLIC_INTERFACE
def get_repository(request: Request) -> TodoRepository:
    """
    Return the repository bound to the store client opened at startup.
    """
    return request.app.state.repository


def _todo_id(todo_id: str) -> ObjectId:
    # Resolved before the body so a bad id is reported first and the store is never reached.
    return parse_identifier(todo_id)


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=TodoList,
    summary="List Todos",
    description="Return every stored Todo item. No ordering is guaranteed.",
    responses={**_STORE_FAILURE},
)
@router.get("", response_model=TodoList, include_in_schema=False)
def fetch_todos(repo: TodoRepository = Depends(get_repository)) -> TodoList:
    """
    List all todos.
    """
    return TodoList(data=[to_out(doc) for doc in repo.list()])


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=TodoCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item and return the identifier assigned by the store.",
    responses={**_BAD_REQUEST, **_STORE_FAILURE},
)
@router.post("", response_model=TodoCreated, status_code=status.HTTP_201_CREATED, include_in_schema=False)
def create_todo(payload: TodoRequest, repo: TodoRepository = Depends(get_repository)) -> TodoCreated:
    """
    Create a new Todo. The title has already been trimmed and checked by TodoRequest.
    """
    todo_id = repo.create(payload.title, payload.completed)
    return TodoCreated(todo_id=str(todo_id))


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoUpdated,
    summary="Update Todo",
    description=(
        "Replace title and completed of a Todo item. The response reports how many "
        "documents were modified; an unknown id yields updated=0, not an error."
    ),
    responses={**_BAD_REQUEST, **_STORE_FAILURE},
)
def update_todo(
    payload: TodoRequest,
    object_id: ObjectId = Depends(_todo_id),
    repo: TodoRepository = Depends(get_repository),
) -> TodoUpdated:
    """
    Update a Todo without checking beforehand that it exists.
    """
    return TodoUpdated(updated=repo.update(object_id, payload.title, payload.completed))


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    response_model=TodoDeleted,
    summary="Delete Todo",
    description="Delete a Todo item by id. An unknown id yields deleted=0, not an error.",
    responses={**_BAD_REQUEST, **_STORE_FAILURE},
)
def delete_todo(
    object_id: ObjectId = Depends(_todo_id),
    repo: TodoRepository = Depends(get_repository),
) -> TodoDeleted:
    """
    Delete a Todo.
    """
    return TodoDeleted(deleted=repo.delete(object_id))
