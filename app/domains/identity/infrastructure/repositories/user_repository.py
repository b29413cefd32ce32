"""
User Repository Implementation

SQLAlchemy implementation of IUserRepository.
"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import PaginatedResult, Pagination
from app.domains.identity.application.ports import IUserRepository
from app.domains.identity.domain.entities import User, UserAddress
from app.domains.identity.domain.value_objects import UserRole, UserStatus
from app.models.db import UserModel

logger = logging.getLogger(__name__)


class SQLAlchemyUserRepository(IUserRepository):
    """
    SQLAlchemy implementation of user repository.

    Writes are flushed, never committed; the request unit of work commits.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, user_id: UUID) -> UserModel | None:
        result = await self.session.execute(select(UserModel).where(UserModel.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: UUID) -> User | None:
        model = await self._get_model(user_id)
        return self._to_entity(model) if model else None

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(UserModel).where(UserModel.email == email.lower()))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def email_exists(self, email: str) -> bool:
        result = await self.session.execute(select(UserModel.id).where(UserModel.email == email.lower()))
        return result.scalar_one_or_none() is not None

    async def create(self, user: User) -> User:
        try:
            model = UserModel(id=user.id)
            self._apply(model, user)
            self.session.add(model)
            await self.session.flush()
            return self._to_entity(model)
        except Exception as e:
            logger.error(f"Error creating user {user.email}: {e}")
            raise

    async def save(self, user: User) -> User:
        model = await self._get_model(user.id)  # type: ignore[arg-type]
        if model is None:
            return await self.create(user)
        self._apply(model, user)
        await self.session.flush()
        return self._to_entity(model)

    async def list(
        self,
        pagination: Pagination,
        search: str | None = None,
        role: str | None = None,
        status: str | None = None,
    ) -> PaginatedResult[User]:
        conditions = [UserModel.is_deleted.is_(False)]
        if role:
            conditions.append(UserModel.role == role)
        if status:
            conditions.append(UserModel.status == status)
        if search:
            pattern = f"%{search}%"
            conditions.append(
                or_(
                    UserModel.first_name.ilike(pattern),
                    UserModel.last_name.ilike(pattern),
                    UserModel.email.ilike(pattern),
                    UserModel.phone.ilike(pattern),
                )
            )

        total = (await self.session.execute(select(func.count(UserModel.id)).where(*conditions))).scalar_one()
        result = await self.session.execute(
            select(UserModel)
            .where(*conditions)
            .order_by(UserModel.created_at.desc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        users = [self._to_entity(m) for m in result.scalars().all()]
        return PaginatedResult(items=users, total=total, pagination=pagination)

    async def get_stats(self, month_start: datetime) -> dict[str, int]:
        not_deleted = UserModel.is_deleted.is_(False)

        async def count(*conditions) -> int:
            stmt = select(func.count(UserModel.id)).where(not_deleted, *conditions)
            return (await self.session.execute(stmt)).scalar_one()

        return {
            "total": await count(),
            "customers": await count(UserModel.role == UserRole.CUSTOMER.value),
            "admins": await count(UserModel.role.in_([UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value])),
            "active": await count(UserModel.status == UserStatus.ACTIVE.value),
            "blocked": await count(UserModel.status == UserStatus.BLOCKED.value),
            "newThisMonth": await count(UserModel.created_at >= month_start),
        }

    async def record_purchase(self, user_id: UUID, amount: float) -> None:
        await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(
                total_orders=UserModel.total_orders + 1,
                total_spent=UserModel.total_spent + amount,
            )
        )

    async def set_wishlist_total(self, user_id: UUID, total: int) -> None:
        await self.session.execute(
            update(UserModel).where(UserModel.id == user_id).values(total_wishlist_items=max(0, total))
        )

    # Mapping methods

    def _apply(self, model: UserModel, user: User) -> None:
        model.email = user.email
        model.password_hash = user.password_hash
        model.first_name = user.first_name
        model.last_name = user.last_name
        model.phone = user.phone
        model.avatar = user.avatar
        model.bio = user.bio
        model.date_of_birth = user.date_of_birth
        model.gender = user.gender
        model.addresses = [a.to_dict() for a in user.addresses]
        model.role = user.role.value
        model.status = user.status.value
        model.is_email_verified = user.is_email_verified
        model.is_deleted = user.is_deleted
        model.total_orders = user.total_orders
        model.total_spent = user.total_spent
        model.total_wishlist_items = user.total_wishlist_items
        model.password_changed_at = user.password_changed_at
        model.last_login_at = user.last_login_at

    def _to_entity(self, model: UserModel) -> User:
        user = User(
            id=model.id,
            email=model.email,
            password_hash=model.password_hash,
            first_name=model.first_name,
            last_name=model.last_name,
            phone=model.phone,
            avatar=model.avatar,
            bio=model.bio,
            date_of_birth=model.date_of_birth,
            gender=model.gender,
            addresses=[UserAddress.from_dict(a) for a in (model.addresses or [])],
            role=UserRole(model.role or "customer"),
            status=UserStatus(model.status or "active"),
            is_email_verified=bool(model.is_email_verified),
            is_deleted=bool(model.is_deleted),
            total_orders=model.total_orders or 0,
            total_spent=float(model.total_spent or 0),
            total_wishlist_items=model.total_wishlist_items or 0,
            password_changed_at=model.password_changed_at,
            last_login_at=model.last_login_at,
        )
        if model.created_at is not None:
            user.created_at = model.created_at
        if model.updated_at is not None:
            user.updated_at = model.updated_at
        return user
