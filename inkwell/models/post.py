"""
Blog Post Model
"""

from datetime import datetime
from inkwell.extensions import db


class Post(db.Model):
    """Markdown blog post written by a user"""
    __tablename__ = 'posts'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(300), unique=True, nullable=False, index=True)
    content = db.Column(db.Text, nullable=False)
    published = db.Column(db.Boolean, nullable=False, default=False)
    author_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    author = db.relationship('User', back_populates='posts')

    def author_dict(self, include_email=False, include_bio=False):
        if self.author is None:
            return None
        data = {'id': self.author.id, 'name': self.author.name}
        if include_email:
            data['email'] = self.author.email
        if include_bio:
            profile = self.author.profile
            data['profile'] = {'bio': profile.bio if profile else None}
        return data

    def to_dict(self, include_content=True, author=None):
        data = {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'published': self.published,
            'author_id': self.author_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_content:
            data['content'] = self.content
        if author is not None:
            data['author'] = author
        return data

    def __repr__(self):
        return f'<Post {self.slug}>'
