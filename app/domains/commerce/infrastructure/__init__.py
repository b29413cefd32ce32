"""
Commerce Infrastructure Layer
"""
