"""
User and Profile Models
"""

from datetime import datetime
from flask_login import UserMixin
from inkwell.extensions import db

ROLE_USER = 'USER'
ROLE_ADMIN = 'ADMIN'
ROLES = (ROLE_USER, ROLE_ADMIN)

PROFILE_FIELDS = (
    'bio',
    'location',
    'job_title',
    'company',
    'website',
    'twitter_handle',
    'github_handle',
    'linkedin_handle',
    'avatar_url',
)


def _iso(value):
    return value.isoformat() if value else None


class User(UserMixin, db.Model):
    """User account; the password hash never leaves this model"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(120))
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(10), nullable=False, default=ROLE_USER, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    profile = db.relationship('Profile', back_populates='user', uselist=False,
                              cascade='all, delete-orphan')
    posts = db.relationship('Post', back_populates='author', lazy='dynamic')

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    def to_dict(self, include_profile=False, post_count=None):
        data = {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'role': self.role,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }
        if include_profile:
            data['profile'] = self.profile.to_dict() if self.profile else None
        if post_count is not None:
            data['post_count'] = post_count
        return data

    def __repr__(self):
        return f'<User {self.email} {self.role}>'


class Profile(db.Model):
    """Optional profile details, one per user"""
    __tablename__ = 'profiles'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'),
                        unique=True, nullable=False)
    bio = db.Column(db.Text)
    location = db.Column(db.String(120))
    job_title = db.Column(db.String(120))
    company = db.Column(db.String(120))
    website = db.Column(db.String(255))
    twitter_handle = db.Column(db.String(80))
    github_handle = db.Column(db.String(80))
    linkedin_handle = db.Column(db.String(80))
    avatar_url = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship('User', back_populates='profile')

    def to_dict(self):
        data = {field: getattr(self, field) for field in PROFILE_FIELDS}
        data['id'] = self.id
        data['user_id'] = self.user_id
        data['created_at'] = _iso(self.created_at)
        data['updated_at'] = _iso(self.updated_at)
        return data

    def __repr__(self):
        return f'<Profile user:{self.user_id}>'
