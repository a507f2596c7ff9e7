"""
User service.

Local user profiles owning ledgers and creating transactions.
"""

from typing import List, Optional

from ledgerstore.app.models.user import User
from ledgerstore.app.schemas.user import UserCreate, UserUpdate
from ledgerstore.app.services.base_crud import BaseCRUDService, Payload


class UserService(BaseCRUDService[User]):
    """Repository for users. Lists are ordered by name."""

    model = User
    create_schema = UserCreate
    update_schema = UserUpdate
    resource_name = "User"

    def default_order(self) -> tuple:
        return (User.name.asc(),)

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find the first user with this email, or None."""
        return await self._first(User.email == email)

    async def find_active_users(self) -> List[User]:
        return await self._select(User.is_active.is_(True))

    async def create_user(self, data: Payload) -> User:
        return await self.create(data)

    async def deactivate_user(self, user_id: str) -> Optional[User]:
        return await self._update_values(user_id, {"is_active": False})

    async def activate_user(self, user_id: str) -> Optional[User]:
        return await self._update_values(user_id, {"is_active": True})
