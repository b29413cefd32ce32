"""
User aggregate.

Owns the address book and the account state checks used at login and on
every authenticated request.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any
from uuid import UUID, uuid4

from app.core.domain import (
    AggregateRoot,
    AuthenticationException,
    AuthorizationException,
    EntityNotFoundException,
    iso,
    sid,
    utcnow,
)

from ..events import UserRegistered
from ..value_objects import UserRole, UserStatus


@dataclass
class UserAddress:
    """Entry of a user's address book."""

    full_name: str
    phone: str
    street: str
    city: str
    state: str | None = None
    zip_code: str | None = None
    country: str = "Bangladesh"
    label: str = "Home"
    is_default: bool = False
    id: UUID = field(default_factory=uuid4)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "label": self.label,
            "fullName": self.full_name,
            "phone": self.phone,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
            "country": self.country,
            "isDefault": self.is_default,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserAddress":
        return cls(
            id=UUID(data["id"]) if data.get("id") else uuid4(),
            label=data.get("label") or "Home",
            full_name=data.get("fullName", ""),
            phone=data.get("phone", ""),
            street=data.get("street", ""),
            city=data.get("city", ""),
            state=data.get("state"),
            zip_code=data.get("zipCode"),
            country=data.get("country") or "Bangladesh",
            is_default=bool(data.get("isDefault", False)),
        )


@dataclass
class User(AggregateRoot[UUID]):
    """
    Registered user.

    `password_hash` is carried for credential checks only and is never part
    of `to_dict()`.
    """

    email: str = ""
    password_hash: str = ""
    first_name: str = ""
    last_name: str = ""
    phone: str | None = None
    avatar: str | None = None
    bio: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    addresses: list[UserAddress] = field(default_factory=list)

    role: UserRole = UserRole.CUSTOMER
    status: UserStatus = UserStatus.ACTIVE
    is_email_verified: bool = False
    is_deleted: bool = False

    total_orders: int = 0
    total_spent: float = 0.0
    total_wishlist_items: int = 0

    password_changed_at: datetime | None = None
    last_login_at: datetime | None = None

    @classmethod
    def register(
        cls,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        phone: str | None = None,
    ) -> "User":
        user = cls(
            id=uuid4(),
            email=email.strip().lower(),
            password_hash=password_hash,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            phone=phone,
        )
        user._record_event(UserRegistered(user_id=user.id, email=user.email, full_name=user.full_name))
        return user

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_staff(self) -> bool:
        return self.role.is_staff()

    # Account state

    def ensure_active(self) -> None:
        """
        Raise if this account may not act.

        Raises:
            AuthenticationException: Account was deleted
            AuthorizationException: Account is blocked
        """
        if self.is_deleted:
            raise AuthenticationException("This user account has been deleted.")
        if self.status == UserStatus.BLOCKED:
            raise AuthorizationException("Your account has been blocked. Contact support.")

    def record_login(self) -> None:
        self.last_login_at = utcnow()
        self.touch()

    def change_password_hash(self, new_hash: str) -> None:
        self.password_hash = new_hash
        self.password_changed_at = utcnow()
        self.touch()

    def soft_delete(self) -> None:
        self.is_deleted = True
        self.touch()

    # Address book

    def _find_address(self, address_id: UUID) -> UserAddress:
        for address in self.addresses:
            if address.id == address_id:
                return address
        raise EntityNotFoundException("Address", address_id, "Address not found")

    def _make_default(self, target: UserAddress) -> None:
        for address in self.addresses:
            address.is_default = address is target

    def add_address(self, address: UserAddress) -> UserAddress:
        """Add an address; the first one (or one flagged default) becomes the default."""
        self.addresses.append(address)
        if address.is_default or len(self.addresses) == 1:
            self._make_default(address)
        self.touch()
        return address

    def update_address(self, address_id: UUID, changes: dict[str, Any]) -> UserAddress:
        address = self._find_address(address_id)
        for key, value in changes.items():
            if key == "is_default":
                continue
            if hasattr(address, key):
                setattr(address, key, value)
        if changes.get("is_default"):
            self._make_default(address)
        self.touch()
        return address

    def remove_address(self, address_id: UUID) -> None:
        address = self._find_address(address_id)
        self.addresses.remove(address)
        if address.is_default and self.addresses:
            self.addresses[0].is_default = True
        self.touch()

    def set_default_address(self, address_id: UUID) -> UserAddress:
        address = self._find_address(address_id)
        self._make_default(address)
        self.touch()
        return address

    def default_address(self) -> UserAddress | None:
        for address in self.addresses:
            if address.is_default:
                return address
        return self.addresses[0] if self.addresses else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": sid(self.id),
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "fullName": self.full_name,
            "phone": self.phone,
            "avatar": self.avatar,
            "bio": self.bio,
            "dateOfBirth": self.date_of_birth.isoformat() if self.date_of_birth else None,
            "gender": self.gender,
            "addresses": [a.to_dict() for a in self.addresses],
            "role": self.role.value,
            "status": self.status.value,
            "isEmailVerified": self.is_email_verified,
            "totalOrders": self.total_orders,
            "totalSpent": self.total_spent,
            "totalWishlistItems": self.total_wishlist_items,
            "lastLoginAt": iso(self.last_login_at),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
