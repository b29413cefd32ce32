"""
Analytics Infrastructure Layer
"""
