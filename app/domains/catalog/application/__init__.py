"""
Catalog Application Layer
"""
