"""
Identity Infrastructure Layer
"""
