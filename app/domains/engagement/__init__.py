"""
Engagement Domain

Product reviews, wishlists and in-app notifications.
"""
