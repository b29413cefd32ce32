"""
Engagement Infrastructure Layer
"""
