"""
Models Package

Exports all models for easy importing.
"""

from inkwell.models.user import User, Profile, ROLE_USER, ROLE_ADMIN, ROLES, PROFILE_FIELDS
from inkwell.models.post import Post
from inkwell.models.settings import SiteSettings, SITE_SETTINGS_ID

__all__ = [
    'User',
    'Profile',
    'Post',
    'SiteSettings',
    'ROLE_USER',
    'ROLE_ADMIN',
    'ROLES',
    'PROFILE_FIELDS',
    'SITE_SETTINGS_ID',
]
