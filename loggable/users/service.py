from typing import List, Optional

from loggable.core.decorators import Service
from loggable.core.logging import get_logger
from loggable.exceptions import EmailAlreadyExistsException, UserNotFoundException
from loggable.users.dto import UserDTO, UserResponse
from loggable.users.models import User
from loggable.users.repository import UserRepository

logger = get_logger(__name__)


@Service()
class UserService:
    """User CRUD rules: unique emails, not-found errors on unknown ids."""

    def __init__(self, user_repository: Optional[UserRepository] = None):
        self.user_repository = user_repository or UserRepository()

    def create_user(self, user_dto: UserDTO) -> UserResponse:
        if self.user_repository.exists_by_email(user_dto.email):
            logger.warning(
                "Attempted to create user with existing email: %s", user_dto.email
            )
            raise EmailAlreadyExistsException(user_dto.email)

        saved = self.user_repository.save(
            User(
                name=user_dto.name,
                email=user_dto.email,
                description=user_dto.description,
            )
        )
        logger.info("User created with ID: %s and email: %s", saved.id, saved.email)
        return UserResponse.from_user(saved)

    def get_user_by_id(self, user_id: int) -> UserResponse:
        user = self.user_repository.find_by_id(user_id)
        if user is None:
            raise UserNotFoundException(user_id)
        return UserResponse.from_user(user)

    def get_all_users(self) -> List[UserResponse]:
        users = [UserResponse.from_user(u) for u in self.user_repository.find_all()]
        logger.debug("Retrieved %d users", len(users))
        return users

    def update_user(self, user_id: int, user_dto: UserDTO) -> UserResponse:
        user = self.user_repository.find_by_id(user_id)
        if user is None:
            raise UserNotFoundException(user_id)

        # Only a changed email can collide with another user
        if user.email != user_dto.email and self.user_repository.exists_by_email(
            user_dto.email
        ):
            logger.warning(
                "Attempted to update user %s with existing email: %s",
                user_id,
                user_dto.email,
            )
            raise EmailAlreadyExistsException(user_dto.email)

        user.name = user_dto.name
        user.email = user_dto.email
        user.description = user_dto.description
        updated = self.user_repository.save(user)
        return UserResponse.from_user(updated)

    def delete_user(self, user_id: int):
        if not self.user_repository.exists_by_id(user_id):
            raise UserNotFoundException(user_id)
        self.user_repository.delete_by_id(user_id)
        logger.info("User deleted with ID: %s", user_id)


SAMPLE_USERS = [
    UserDTO("John Doe", "john.doe@example.com", "Software Developer"),
    UserDTO("Jane Smith", "jane.smith@example.com", "Product Manager"),
    UserDTO("Bob Johnson", "bob.johnson@example.com", "Designer"),
]


def seed_users(repository: UserRepository) -> int:
    """Insert the sample users into an empty repository. Returns the resulting count."""
    existing = repository.count()
    if existing:
        logger.info("Repository already contains %d users, skipping seeding", existing)
        return existing

    for dto in SAMPLE_USERS:
        user = repository.save(User(dto.name, dto.email, dto.description))
        logger.info("Created sample user: %s (ID: %s)", user.email, user.id)
    return repository.count()
