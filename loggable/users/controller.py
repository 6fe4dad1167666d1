from loggable.core.decorators import RestController
from loggable.core.instrumentation import Loggable
from loggable.users.dto import UserDTO
from loggable.users.service import UserService
from loggable.web.response import ResponseEntity


@RestController("/api/users")
class UserController:
    """
    User endpoints. HTTP binding lives in loggable.web.app; these methods
    take already-bound values and let domain exceptions propagate.
    """

    def __init__(self, user_service: UserService):
        self.user_service = user_service

    async def create_user(self, user_dto: UserDTO) -> ResponseEntity:
        user = self.user_service.create_user(user_dto)
        return ResponseEntity.created(
            user, headers={"Location": f"/api/users/{user.id}"}
        )

    async def get_user_by_id(self, user_id: int) -> ResponseEntity:
        return ResponseEntity.ok(self.user_service.get_user_by_id(user_id))

    # Listing can be large; keep the line short
    @Loggable(log_result=False)
    async def get_all_users(self) -> ResponseEntity:
        return ResponseEntity.ok(self.user_service.get_all_users())

    async def update_user(self, user_id: int, user_dto: UserDTO) -> ResponseEntity:
        return ResponseEntity.ok(self.user_service.update_user(user_id, user_dto))

    async def delete_user(self, user_id: int) -> ResponseEntity:
        self.user_service.delete_user(user_id)
        return ResponseEntity.no_content()
