"""
Credential and Token Security

Password hashing wraps Werkzeug; access tokens are HS256 JWTs that carry
only the user id and role. Validation fails open to "no identity" so a
bad token is treated exactly like a missing one.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from werkzeug.security import generate_password_hash, check_password_hash

from inkwell.errors import InvalidCredentials
from inkwell.models import User, ROLE_ADMIN, ROLES

logger = logging.getLogger(__name__)

PASSWORD_HASH_METHOD = 'pbkdf2:sha256'


def hash_password(password):
    return generate_password_hash(password, method=PASSWORD_HASH_METHOD)


def verify_password(password, password_hash):
    """Constant-time comparison against a stored hash."""
    if not password or not password_hash:
        return False
    return check_password_hash(password_hash, password)


def normalize_email(email):
    return (email or '').strip().lower()


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a validated access token"""
    user_id: int
    role: str

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN


def token_from_request(request, cookie_name):
    """Return the raw token from a Bearer header, falling back to the cookie."""
    auth_header = request.headers.get('Authorization', '')
    if auth_header.startswith('Bearer '):
        token = auth_header[len('Bearer '):].strip()
        if token:
            return token
    return request.cookies.get(cookie_name) or None


class TokenIssuer:
    """Issues and validates signed access tokens.

    The signing secret is handed in once at construction and never changes
    for the lifetime of the issuer.
    """

    def __init__(self, secret, algorithm='HS256', expires_hours=8):
        if not secret:
            raise ValueError('JWT secret must not be blank')
        self._secret = secret
        self.algorithm = algorithm
        self.expires_hours = expires_hours

    @classmethod
    def from_config(cls, config):
        return cls(
            secret=config['JWT_SECRET_KEY'],
            algorithm=config.get('JWT_ALGORITHM', 'HS256'),
            expires_hours=config.get('JWT_EXPIRES_HOURS', 8),
        )

    def encode(self, user):
        now = datetime.now(timezone.utc)
        payload = {
            'sub': str(user.id),
            'role': user.role,
            'iat': now,
            'exp': now + timedelta(hours=self.expires_hours),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def issue(self, email, password):
        """Verify credentials and return ``(token, user)``.

        Raises InvalidCredentials for an unknown email or a wrong password,
        without telling the caller which one it was.
        """
        user = User.query.filter_by(email=normalize_email(email)).first()
        if user is None or not verify_password(password, user.password_hash):
            logger.info('Rejected login for %s', normalize_email(email))
            raise InvalidCredentials()
        return self.encode(user), user

    def validate(self, token):
        """Return TokenClaims for a good token, None for anything else."""
        if not token:
            return None
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={'require': ['exp', 'sub']},
            )
            user_id = int(payload['sub'])
        except jwt.InvalidTokenError as e:
            logger.debug('Ignoring invalid token: %s', e)
            return None
        except (TypeError, ValueError):
            logger.debug('Ignoring token with a non-integer subject')
            return None

        role = payload.get('role')
        if role not in ROLES:
            return None
        return TokenClaims(user_id=user_id, role=role)
