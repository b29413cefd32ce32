"""
Core building blocks shared by every domain: settings-driven app factory,
dependency container, DDD base types and the Redis cache.
"""
