"""
Blog Post Services

Admin CRUD for posts plus the public, published-only read paths.
"""

import logging
import re
import time

from inkwell.errors import Conflict, NotFound, ValidationError
from inkwell.extensions import db
from inkwell.models import Post, User

logger = logging.getLogger(__name__)

SLUG_SUFFIX_MODULUS = 10000
_NON_ALNUM = re.compile(r'[^a-z0-9]+')


def slugify_title(title):
    """Lower-case, collapse non-alphanumeric runs to '-', trim hyphens."""
    base = _NON_ALNUM.sub('-', title.lower()).strip('-')
    return base or 'post'


def timestamp_suffix():
    """Low-order four digits of the current millisecond timestamp."""
    return int(time.time() * 1000) % SLUG_SUFFIX_MODULUS


def generate_slug(title, exclude_post_id=None):
    """Build `<slugified-title>-NNNN`, bumping NNNN past slugs already taken."""
    base = slugify_title(title)
    suffix = timestamp_suffix()
    for _ in range(SLUG_SUFFIX_MODULUS):
        slug = f'{base}-{suffix:04d}'
        query = Post.query.filter_by(slug=slug)
        if exclude_post_id is not None:
            query = query.filter(Post.id != exclude_post_id)
        if query.first() is None:
            return slug
        suffix = (suffix + 1) % SLUG_SUFFIX_MODULUS
    raise Conflict(f'No free slug left for "{title}"')


def _require_text(value, label):
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{label} cannot be empty')
    return value


def _require_flag(value, label):
    if not isinstance(value, bool):
        raise ValidationError(f'{label} must be true or false')
    return value


def _require_author(author_id):
    author = db.session.get(User, author_id) if author_id is not None else None
    if author is None:
        raise ValidationError('Author not found')
    return author


def _admin_dict(post):
    return post.to_dict(author=post.author_dict(include_email=True))


def _get_post_or_404(post_id):
    post = db.session.get(Post, post_id)
    if post is None:
        raise NotFound('Blog post not found')
    return post


def admin_list_posts():
    posts = Post.query.order_by(Post.created_at.desc(), Post.id.desc()).all()
    return [_admin_dict(p) for p in posts]


def admin_get_post(post_id):
    return _admin_dict(_get_post_or_404(post_id))


def create_post(title, content, published=False, author_id=None, requested_by=None):
    """Create a post; the author defaults to the admin making the request."""
    title = _require_text(title, 'Title')
    content = _require_text(content, 'Content')
    published = _require_flag(published, 'Published')
    author = _require_author(author_id or requested_by)

    post = Post(
        title=title,
        slug=generate_slug(title),
        content=content,
        published=published,
        author_id=author.id,
    )
    db.session.add(post)
    db.session.commit()
    logger.info('Created post %s (id=%s) by author id=%s', post.slug, post.id, author.id)
    return _admin_dict(post)


def update_post(post_id, fields):
    """Partial update. A changed title regenerates the slug; old slugs stop resolving."""
    post = _get_post_or_404(post_id)

    if 'title' in fields:
        title = _require_text(fields['title'], 'Title')
        if title != post.title:
            post.slug = generate_slug(title, exclude_post_id=post.id)
        post.title = title
    if 'content' in fields:
        post.content = _require_text(fields['content'], 'Content')
    if 'published' in fields:
        post.published = _require_flag(fields['published'], 'Published')
    if 'author_id' in fields:
        post.author_id = _require_author(fields['author_id']).id

    db.session.commit()
    return _admin_dict(post)


def delete_post(post_id):
    post = _get_post_or_404(post_id)
    db.session.delete(post)
    db.session.commit()
    logger.info('Deleted post id=%s', post_id)


def public_list_posts():
    """Published posts only, newest first."""
    posts = (Post.query
             .filter_by(published=True)
             .order_by(Post.created_at.desc(), Post.id.desc())
             .all())
    return [p.to_dict(author=p.author_dict()) for p in posts]


def public_get_post(slug):
    """A published post by slug; drafts are indistinguishable from missing posts."""
    post = Post.query.filter_by(slug=slug, published=True).first()
    if post is None:
        raise NotFound('Blog post not found')
    return post.to_dict(author=post.author_dict(include_bio=True))
