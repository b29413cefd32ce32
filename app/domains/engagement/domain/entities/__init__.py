from .notification import Notification
from .review import Review
from .wishlist import Wishlist, WishlistItem

__all__ = ["Notification", "Review", "Wishlist", "WishlistItem"]
