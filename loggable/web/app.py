"""
Starlette application exposing the user API.

Routes bind HTTP requests to UserController calls and translate
ProblemException subclasses into application/problem+json responses.
"""

from typing import Any, Optional

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from loggable.config import get_config
from loggable.core.instrumentation import configure_interceptor
from loggable.core.logging import get_logger
from loggable.core.serialization import serialize_json
from loggable.exceptions import ProblemException, RequestValidationException
from loggable.users.controller import UserController
from loggable.users.dto import UserDTO
from loggable.users.repository import UserRepository
from loggable.users.service import UserService, seed_users
from loggable.web.response import ResponseEntity

logger = get_logger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


class LoggableJSONResponse(JSONResponse):
    """JSONResponse that understands dataclasses, datetimes, UUIDs and enums."""

    def render(self, content: Any) -> bytes:
        return serialize_json(content).encode("utf-8")


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as e:
        raise RequestValidationException("Malformed JSON request body") from e


def _to_response(entity: ResponseEntity) -> Response:
    if entity.body is None:
        return Response(status_code=entity.status, headers=entity.headers)
    return LoggableJSONResponse(
        entity.body, status_code=entity.status, headers=entity.headers
    )


async def handle_problem(request: Request, exc: ProblemException) -> Response:
    if exc.status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    else:
        logger.warning(
            "%s %s rejected with %d: %s",
            request.method,
            request.url.path,
            exc.status,
            exc.detail,
        )
    return JSONResponse(
        exc.to_problem(), status_code=exc.status, media_type=PROBLEM_MEDIA_TYPE
    )


def create_app(
    user_service: Optional[UserService] = None, config=None, debug: bool = False
) -> Starlette:
    """
    Build the Starlette app.

    Args:
        user_service: Service to expose; a fresh in-memory one by default
        config: Configuration for app.* and logging.aspect.* keys; the
            process-wide interceptor is rebuilt from it
        debug: Starlette debug mode
    """
    config = config or get_config()
    configure_interceptor(config)

    if user_service is None:
        repository = UserRepository()
        if config.get_bool("app.seed_data"):
            seed_users(repository)
        user_service = UserService(repository)

    controller = UserController(user_service)
    base_path = UserController.__loggable_base_path__
    item_path = base_path + "/{user_id:int}"

    async def create_user(request: Request) -> Response:
        user_dto = UserDTO.from_dict(await _read_json(request))
        return _to_response(await controller.create_user(user_dto))

    async def get_all_users(request: Request) -> Response:
        return _to_response(await controller.get_all_users())

    async def get_user_by_id(request: Request) -> Response:
        user_id = request.path_params["user_id"]
        return _to_response(await controller.get_user_by_id(user_id))

    async def update_user(request: Request) -> Response:
        user_id = request.path_params["user_id"]
        user_dto = UserDTO.from_dict(await _read_json(request))
        return _to_response(await controller.update_user(user_id, user_dto))

    async def delete_user(request: Request) -> Response:
        user_id = request.path_params["user_id"]
        return _to_response(await controller.delete_user(user_id))

    routes = [
        Route(base_path, create_user, methods=["POST"]),
        Route(base_path, get_all_users, methods=["GET"]),
        Route(item_path, get_user_by_id, methods=["GET"]),
        Route(item_path, update_user, methods=["PUT"]),
        Route(item_path, delete_user, methods=["DELETE"]),
    ]

    return Starlette(
        debug=debug,
        routes=routes,
        exception_handlers={ProblemException: handle_problem},
    )
