"""
Identity Application Layer
"""
