from loggable.users.controller import UserController
from loggable.users.dto import UserDTO, UserResponse
from loggable.users.models import User
from loggable.users.repository import UserRepository
from loggable.users.service import UserService, seed_users

__all__ = [
    "User",
    "UserController",
    "UserDTO",
    "UserRepository",
    "UserResponse",
    "UserService",
    "seed_users",
]
