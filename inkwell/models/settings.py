"""
Site Settings Model
"""

from datetime import datetime
from inkwell.extensions import db

SITE_SETTINGS_ID = 'site-settings'


class SiteSettings(db.Model):
    """Singleton branding record keyed by SITE_SETTINGS_ID"""
    __tablename__ = 'site_settings'

    id = db.Column(db.String(32), primary_key=True, default=SITE_SETTINGS_ID)
    logo_text = db.Column(db.String(120), nullable=False, default='MyApp')
    logo_image = db.Column(db.LargeBinary)
    logo_mime_type = db.Column(db.String(100))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def has_logo(self):
        return self.logo_image is not None and self.logo_mime_type is not None

    def to_dict(self):
        # The image bytes are served separately by /api/logo-image
        return {
            'id': self.id,
            'logo_text': self.logo_text,
            'logo_mime_type': self.logo_mime_type,
            'has_logo': self.has_logo,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<SiteSettings {self.logo_text!r} logo:{self.has_logo}>'
