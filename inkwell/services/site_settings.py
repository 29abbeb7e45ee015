"""
Site Settings Services

Branding lives in a single row keyed by SITE_SETTINGS_ID. It is created
lazily on first access; the primary key makes concurrent first access
settle on one row.
"""

import logging

from flask import current_app
from sqlalchemy.exc import IntegrityError

from inkwell.errors import InvalidFileType, NotFound, ValidationError
from inkwell.extensions import db
from inkwell.models import SiteSettings, SITE_SETTINGS_ID

logger = logging.getLogger(__name__)


def get_settings():
    """Get-or-create the singleton settings row."""
    settings = db.session.get(SiteSettings, SITE_SETTINGS_ID)
    if settings is not None:
        return settings

    settings = SiteSettings(id=SITE_SETTINGS_ID, logo_text=current_app.config['DEFAULT_LOGO_TEXT'])
    db.session.add(settings)
    try:
        db.session.commit()
        logger.info('Created default site settings')
    except IntegrityError:
        # Another request created it first
        db.session.rollback()
        settings = db.session.get(SiteSettings, SITE_SETTINGS_ID)
    return settings


def update_settings(logo_text=None, remove_image=False):
    """Update the logo text; `remove_image` clears the image in the same commit."""
    if logo_text is not None and not isinstance(logo_text, str):
        raise ValidationError('logo_text must be a string')

    settings = get_settings()
    if logo_text is not None:
        settings.logo_text = logo_text
    if remove_image:
        settings.logo_image = None
        settings.logo_mime_type = None
    db.session.commit()
    return settings


def upload_logo_image(data, mime_type):
    """Store raw image bytes and their MIME type on the settings row.

    Raises:
        ValidationError: empty upload or larger than MAX_LOGO_BYTES
        InvalidFileType: MIME type is not image/*
    """
    if not data:
        raise ValidationError('No file uploaded')

    top_level, _, subtype = (mime_type or '').partition('/')
    if top_level.lower() != 'image' or not subtype:
        raise InvalidFileType()

    max_bytes = current_app.config['MAX_LOGO_BYTES']
    if len(data) > max_bytes:
        raise ValidationError(f'Logo image cannot exceed {max_bytes} bytes')

    settings = get_settings()
    settings.logo_image = data
    settings.logo_mime_type = mime_type
    db.session.commit()
    logger.info('Stored %d byte logo image (%s)', len(data), mime_type)
    return settings


def get_logo_image():
    """Return ``(bytes, mime_type)`` or raise NotFound when no image is set."""
    settings = db.session.get(SiteSettings, SITE_SETTINGS_ID)
    if settings is None or not settings.has_logo:
        raise NotFound('No logo image set')
    return settings.logo_image, settings.logo_mime_type
