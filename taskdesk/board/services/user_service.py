from typing import List

from taskdesk.board.core.exceptions import ConflictError, NotFoundError
from taskdesk.board.core.security import hash_password
from taskdesk.board.models import MessageResponse, UserResponse, UserUpdateRequest
from taskdesk.board.repositories import UserRepository
from taskdesk.board.services.common import internal_error_on_failure
from taskdesk.core import TaskdeskBase
from taskdesk.database import DuplicateInsertError


class UserService(TaskdeskBase):
    """User management. Role checks (ADMIN-only listing and deletion) happen in the access-control layer."""

    def __init__(self, user_repo: UserRepository, **kwargs):
        super().__init__(**kwargs)
        self.user_repo = user_repo

    @internal_error_on_failure("Failed to fetch users")
    async def list_all(self) -> List[UserResponse]:
        return [UserResponse.from_user(user) for user in await self.user_repo.list()]

    @internal_error_on_failure("Failed to fetch user")
    async def get_by_id(self, user_id: str) -> UserResponse:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return UserResponse.from_user(user)

    @internal_error_on_failure("Failed to update user")
    async def update_profile(self, user_id: str, payload: UserUpdateRequest) -> UserResponse:
        """Apply a partial profile update; a new password is re-hashed before storing.

        Raises:
            NotFoundError: If the user does not exist.
            ConflictError: If the new email is registered to another user.
        """
        if await self.user_repo.get_by_id(user_id) is None:
            raise NotFoundError("User not found")

        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "email" in changes:
            other = await self.user_repo.get_by_email(changes["email"])
            if other and other.id != user_id:
                raise ConflictError("Email already registered")
        if "password" in changes:
            changes["password_hash"] = hash_password(changes.pop("password"))

        try:
            user = await self.user_repo.update(user_id, changes)
        except DuplicateInsertError:
            raise ConflictError("Email already registered")
        if user is None:
            raise NotFoundError("User not found")

        self.logger.info("User profile updated", user_id=user_id, fields=sorted(changes))
        return UserResponse.from_user(user)

    @internal_error_on_failure("Failed to delete user")
    async def delete_by_id(self, user_id: str) -> MessageResponse:
        if not await self.user_repo.delete(user_id):
            raise NotFoundError("User not found")
        self.logger.info("User deleted", user_id=user_id)
        return MessageResponse(message="User deleted successfully")
