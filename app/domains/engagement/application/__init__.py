"""
Engagement Application Layer
"""
