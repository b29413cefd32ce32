"""
Commerce Application Layer
"""
