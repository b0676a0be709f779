from taskdesk.board.core.exceptions import ConflictError, UnauthorizedError
from taskdesk.board.core.security import create_access_token, hash_password, verify_password
from taskdesk.board.models import LoginPayload, RegisterPayload, RegisterResponse, TokenResponse, UserResponse
from taskdesk.board.repositories import UserRepository
from taskdesk.board.services.common import internal_error_on_failure
from taskdesk.core import TaskdeskBase
from taskdesk.database import DuplicateInsertError


class AuthService(TaskdeskBase):
    """Registration and login against the credential store."""

    def __init__(self, user_repo: UserRepository, **kwargs):
        super().__init__(**kwargs)
        self.user_repo = user_repo

    @internal_error_on_failure("Failed to register user")
    async def register(self, payload: RegisterPayload) -> RegisterResponse:
        """Create a user with a bcrypt-hashed password.

        Raises:
            ConflictError: If the email is already registered.
        """
        if await self.user_repo.get_by_email(payload.email):
            raise ConflictError("Email already registered")

        try:
            user = await self.user_repo.create(
                name=payload.name,
                email=payload.email,
                password_hash=hash_password(payload.password),
                role=payload.role,
            )
        except DuplicateInsertError:
            # Lost the race to a concurrent registration; the unique index caught it
            raise ConflictError("Email already registered")

        self.logger.info("User registered", user_id=user.id, role=user.role.value)
        return RegisterResponse(message="User registered successfully", user=UserResponse.from_user(user))

    @internal_error_on_failure("Failed to login user")
    async def login(self, payload: LoginPayload) -> TokenResponse:
        """Verify credentials and issue an access token.

        Raises:
            UnauthorizedError: If the email is unknown or the password does not match.
        """
        user = await self.user_repo.get_by_email(payload.email)
        if not user or not verify_password(payload.password, user.password_hash):
            raise UnauthorizedError("Invalid credentials")

        token = create_access_token(subject=user.id, email=user.email, role=user.role)
        return TokenResponse(access_token=token)
