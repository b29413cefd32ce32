"""
Analytics Application Layer
"""
