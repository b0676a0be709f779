from typing import Any, Dict, List, Optional

from taskdesk.board.db import get_db
from taskdesk.board.models import User, UserRole
from taskdesk.database import DocumentNotFoundError, MongoODMBackend


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository:
    """Credential store. Hands out ``User`` records, never raw documents."""

    def _backend(self) -> MongoODMBackend:
        return get_db().user

    @staticmethod
    def _to_model(doc: Any) -> User:
        return User(
            id=str(doc.id),
            name=doc.name,
            email=doc.email,
            password_hash=doc.password_hash,
            role=UserRole(doc.role),
            created_at=getattr(doc, "created_at", None),
            updated_at=getattr(doc, "updated_at", None),
        )

    async def get_by_email(self, email: str) -> Optional[User]:
        doc = await self._backend().find_one({"email": normalize_email(email)})
        if not doc:
            return None
        return self._to_model(doc)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        try:
            doc = await self._backend().get(user_id)
        except DocumentNotFoundError:
            return None
        return self._to_model(doc)

    async def list(self) -> List[User]:
        docs = await self._backend().all()
        return [self._to_model(doc) for doc in docs]

    async def create(self, name: str, email: str, password_hash: str, role: UserRole = UserRole.USER) -> User:
        """Insert a user.

        Raises:
            DuplicateInsertError: If the email is already registered.
        """
        doc = await self._backend().insert(
            {
                "name": name,
                "email": normalize_email(email),
                "password_hash": password_hash,
                "role": role,
            }
        )
        return self._to_model(doc)

    async def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        """Apply ``fields`` to the stored user. Returns None if there is no such user.

        Raises:
            DuplicateInsertError: If the new email belongs to another user.
        """
        backend = self._backend()
        try:
            doc = await backend.get(user_id)
        except DocumentNotFoundError:
            return None

        if "email" in fields:
            fields = {**fields, "email": normalize_email(fields["email"])}
        for key, value in fields.items():
            setattr(doc, key, value)

        doc = await backend.update(doc)
        return self._to_model(doc)

    async def delete(self, user_id: str) -> bool:
        try:
            await self._backend().delete(user_id)
        except DocumentNotFoundError:
            return False
        return True
