"""
Identity Domain

Registration, authentication, user profiles, address books and admin
user management.
"""
