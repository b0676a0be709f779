import pytest

from taskdesk.board.core.exceptions import ConflictError, InternalError, UnauthorizedError
from taskdesk.board.core.security import decode_token
from taskdesk.board.models import LoginPayload, RegisterPayload, RegisterResponse, TokenResponse, UserRole
from taskdesk.database import DuplicateInsertError


class TestAuthBehaviour:
    """Unit tests for task board auth logic using fake repositories."""

    @pytest.mark.asyncio
    async def test_register_creates_user_without_exposing_hash(self, service, user_repo):
        payload = RegisterPayload(name="Amit", email="amit@example.com", password="secret123")

        result = await service.register(payload)

        assert isinstance(result, RegisterResponse)
        assert result.message == "User registered successfully"
        assert result.user.email == "amit@example.com"
        assert result.user.role == UserRole.USER
        assert "password_hash" not in result.user.model_dump()

        stored = await user_repo.get_by_email("amit@example.com")
        assert stored is not None
        assert stored.password_hash != "secret123"

    @pytest.mark.asyncio
    async def test_register_existing_email_conflicts(self, service):
        payload = RegisterPayload(name="Amit", email="amit@example.com", password="secret123")
        await service.register(payload)

        with pytest.raises(ConflictError) as exc:
            await service.register(payload)

        assert exc.value.status_code == 409
        assert exc.value.detail == "Email already registered"

    @pytest.mark.asyncio
    async def test_register_email_is_case_insensitive(self, service):
        await service.register(RegisterPayload(name="Amit", email="amit@example.com", password="secret123"))
        with pytest.raises(ConflictError):
            await service.register(RegisterPayload(name="Amit", email="AMIT@example.com", password="secret123"))

    @pytest.mark.asyncio
    async def test_register_race_on_unique_index_conflicts(self, service, user_repo, monkeypatch):
        async def _lost_race(**kwargs):
            raise DuplicateInsertError("Duplicate key error")

        monkeypatch.setattr(user_repo, "create", _lost_race)
        with pytest.raises(ConflictError):
            await service.register(RegisterPayload(name="Amit", email="amit@example.com", password="secret123"))

    @pytest.mark.asyncio
    async def test_register_store_failure_is_internal(self, service, user_repo, monkeypatch):
        async def _broken(email):
            raise RuntimeError("connection reset")

        monkeypatch.setattr(user_repo, "get_by_email", _broken)
        with pytest.raises(InternalError) as exc:
            await service.register(RegisterPayload(name="Amit", email="amit@example.com", password="secret123"))

        assert exc.value.status_code == 500
        assert exc.value.detail == "Failed to register user"

    @pytest.mark.asyncio
    async def test_register_admin_role(self, service):
        result = await service.register(
            RegisterPayload(name="Root", email="root@example.com", password="secret123", role=UserRole.ADMIN)
        )
        assert result.user.role == UserRole.ADMIN

    @pytest.mark.asyncio
    async def test_login_success_returns_token_with_identity_claims(self, service):
        registered = await service.register(
            RegisterPayload(name="Amit", email="amit@example.com", password="secret123", role=UserRole.ADMIN)
        )

        token = await service.login(LoginPayload(email="amit@example.com", password="secret123"))

        assert isinstance(token, TokenResponse)
        assert token.token_type == "bearer"
        claims = decode_token(token.access_token)
        assert claims.sub == registered.user.id
        assert claims.email == "amit@example.com"
        assert claims.role == UserRole.ADMIN

    @pytest.mark.asyncio
    async def test_login_wrong_password_is_unauthorized(self, service):
        await service.register(RegisterPayload(name="Amit", email="amit@example.com", password="secret123"))

        with pytest.raises(UnauthorizedError) as exc:
            await service.login(LoginPayload(email="amit@example.com", password="wrong-password"))

        assert exc.value.status_code == 401
        assert exc.value.detail == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_login_unknown_email_is_unauthorized(self, service):
        with pytest.raises(UnauthorizedError):
            await service.login(LoginPayload(email="nobody@example.com", password="whatever"))

    @pytest.mark.asyncio
    async def test_login_store_failure_is_internal(self, service, user_repo, monkeypatch):
        async def _broken(email):
            raise RuntimeError("timeout")

        monkeypatch.setattr(user_repo, "get_by_email", _broken)
        with pytest.raises(InternalError, match="Failed to login user"):
            await service.login(LoginPayload(email="amit@example.com", password="secret123"))
