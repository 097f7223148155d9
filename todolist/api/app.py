"""
FastAPI application factory.

Wires the database handle into the service, registers the todo routes and
maps domain errors onto `{"errorMessage": ...}` JSON responses.
"""
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from todolist.api.routes import router
from todolist.config import Config
from todolist.errors import TodoNotFoundError, TodoValidationError
from todolist.repositories.todo_repository import TodoRepository
from todolist.services.database_service import DatabaseService
from todolist.services.todo_service import TodoService

logger = structlog.get_logger(__name__)

INVALID_BODY_MESSAGE = "요청한 데이터 형식이 올바르지 않습니다."
UNEXPECTED_ERROR_MESSAGE = "예상치 못한 에러가 발생하였습니다."


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"errorMessage": message})


def build_todo_service(database: DatabaseService) -> TodoService:
    return TodoService(TodoRepository(database))


def create_app(database: Optional[DatabaseService] = None, config: Optional[Config] = None) -> FastAPI:
    """
    Build the HTTP application.

    When `database` is given the caller owns it and the app uses it as is.
    Otherwise the app opens one from `config` on startup and closes it on
    shutdown.
    """
    config = config or Config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if database is not None:
            yield
            return
        owned = DatabaseService(config.db)
        app.state.todo_service = build_todo_service(owned)
        logger.info("database_ready", path=owned.path)
        try:
            yield
        finally:
            owned.close()

    app = FastAPI(title="todolist-service", lifespan=lifespan)
    if database is not None:
        app.state.todo_service = build_todo_service(database)

    app.include_router(router)

    @app.exception_handler(TodoValidationError)
    async def handle_validation_error(request: Request, exc: TodoValidationError):
        logger.info("validation_failed", path=request.url.path, reason=exc.reason, field=exc.field)
        return _error(status.HTTP_400_BAD_REQUEST, exc.message)

    @app.exception_handler(TodoNotFoundError)
    async def handle_not_found(request: Request, exc: TodoNotFoundError):
        logger.info("todo_not_found", path=request.url.path, todo_id=exc.todo_id)
        return _error(status.HTTP_404_NOT_FOUND, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_bad_body(request: Request, exc: RequestValidationError):
        logger.info("invalid_request_body", path=request.url.path, errors=len(exc.errors()))
        return _error(status.HTTP_400_BAD_REQUEST, INVALID_BODY_MESSAGE)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error("unhandled_error", path=request.url.path, exc_info=exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, UNEXPECTED_ERROR_MESSAGE)

    return app
