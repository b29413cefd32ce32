"""
Engagement Domain Layer
"""
