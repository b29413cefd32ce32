"""
Payments Application Layer
"""
