"""
User Services

Account management behind the admin users API and registration.
Changes that could leave the site without an administrator are guarded
inside the same transaction that applies them.
"""

import logging

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import aliased

from inkwell.auth.security import hash_password, normalize_email
from inkwell.errors import Conflict, LastAdminProtection, NotFound, ValidationError
from inkwell.extensions import db
from inkwell.models import Post, Profile, User, ROLE_ADMIN, ROLE_USER, ROLES, PROFILE_FIELDS

logger = logging.getLogger(__name__)


def _get_user_or_404(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound('User not found')
    return user


def _admin_count_subquery():
    # Aliased so it is not correlated to the row being updated or deleted.
    # MySQL rejects this same-table subquery (error 1093); SQLite and PostgreSQL accept it.
    admins = aliased(User)
    return select(func.count(admins.id)).where(admins.role == ROLE_ADMIN).scalar_subquery()


def _lock_admin_rows():
    """Lock every ADMIN row for the rest of the transaction and return their ids.

    Concurrent demotions or deletions of admins queue up behind this lock,
    so the count read afterwards stays true until commit.
    """
    return db.session.execute(
        select(User.id).where(User.role == ROLE_ADMIN).with_for_update()
    ).scalars().all()


def _validate_role(role):
    if role not in ROLES:
        raise ValidationError(f'Role must be one of: {", ".join(ROLES)}')
    return role


def list_users():
    """All users, newest first, with profile and authored post count."""
    counts = dict(
        db.session.query(Post.author_id, func.count(Post.id))
        .group_by(Post.author_id)
        .all()
    )
    users = User.query.order_by(User.created_at.desc(), User.id.desc()).all()
    return [u.to_dict(include_profile=True, post_count=counts.get(u.id, 0)) for u in users]


def get_user(user_id):
    user = _get_user_or_404(user_id)
    data = user.to_dict(include_profile=True)
    data['posts'] = [
        p.to_dict(include_content=False)
        for p in user.posts.order_by(Post.created_at.desc()).all()
    ]
    return data


def create_user(email, password, role=None, name=None):
    """Create a user with an empty profile.

    Raises:
        ValidationError: missing email/password or unknown role
        Conflict: email already registered
    """
    email = normalize_email(email)
    if not email or not password:
        raise ValidationError('Email and password are required')
    role = _validate_role(role or ROLE_USER)

    if User.query.filter_by(email=email).first():
        raise Conflict('User with this email already exists')

    user = User(
        email=email,
        name=name,
        password_hash=hash_password(password),
        role=role,
        profile=Profile(bio=''),
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict('User with this email already exists')

    logger.info('Created %s user %s (id=%s)', role, email, user.id)
    return user


def _demote_admin(user_id, new_role):
    _lock_admin_rows()
    result = db.session.execute(
        update(User)
        .where(User.id == user_id)
        .where(_admin_count_subquery() > 1)
        .values(role=new_role)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.session.rollback()
        raise LastAdminProtection('Cannot demote the last admin user')


def update_user(user_id, fields):
    """Apply only the keys present in `fields`.

    An empty password means "keep the current one". A `bio` key writes to
    the profile, creating it if the user has none yet.
    """
    user = _get_user_or_404(user_id)

    email = None
    if 'email' in fields:
        email = normalize_email(fields['email'])
        if not email:
            raise ValidationError('Email cannot be empty')
        if email != user.email and User.query.filter_by(email=email).first():
            raise Conflict('User with this email already exists')

    if 'role' in fields:
        role = _validate_role(fields['role'])
        if user.role == ROLE_ADMIN and role != ROLE_ADMIN:
            _demote_admin(user.id, role)
        user.role = role

    if 'name' in fields:
        user.name = fields['name']
    if email is not None:
        user.email = email
    if fields.get('password'):
        user.password_hash = hash_password(fields['password'])
    if 'bio' in fields:
        if user.profile is None:
            user.profile = Profile()
        user.profile.bio = fields['bio']

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict('User with this email already exists')

    logger.info('Updated user id=%s fields=%s', user.id, sorted(k for k in fields if k != 'password'))
    return user


def delete_user(user_id):
    """Delete a user and their profile.

    The admin count check and the delete happen in one transaction: admin
    rows are locked first and the DELETE itself only matches while more than
    one admin remains, so two concurrent deletes can never remove the last
    two admins.
    """
    user = _get_user_or_404(user_id)

    post_count = user.posts.count()
    if post_count:
        raise Conflict(f'User still authors {post_count} post(s); reassign or delete them first')

    if user.role == ROLE_ADMIN and len(_lock_admin_rows()) <= 1:
        db.session.rollback()
        raise LastAdminProtection('Cannot delete the last admin user')

    db.session.execute(
        delete(Profile)
        .where(Profile.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    result = db.session.execute(
        delete(User)
        .where(User.id == user_id)
        .where(or_(User.role != ROLE_ADMIN, _admin_count_subquery() > 1))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.session.rollback()
        raise LastAdminProtection('Cannot delete the last admin user')

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict('User still authors posts; reassign or delete them first')
    db.session.expunge_all()
    logger.info('Deleted user id=%s', user_id)


def update_profile(user, fields):
    """Self-service profile edit for the signed-in user."""
    if 'name' in fields:
        user.name = fields['name']
    if user.profile is None:
        user.profile = Profile()
    for field in PROFILE_FIELDS:
        if field in fields:
            setattr(user.profile, field, fields[field])
    db.session.commit()
    return user


def ensure_admin(email, password, name='Admin'):
    """Create the bootstrap admin unless a user with that email exists."""
    email = normalize_email(email)
    existing = User.query.filter_by(email=email).first()
    if existing is not None:
        logger.info('Admin user %s already exists, skipping seed', email)
        return existing
    user = User(
        email=email,
        name=name,
        password_hash=hash_password(password),
        role=ROLE_ADMIN,
        profile=Profile(bio='System administrator'),
    )
    db.session.add(user)
    db.session.commit()
    logger.info('Admin user %s created', email)
    return user
