"""
Authorization Policy

Pure decision logic: given the claims of the presented token (or None) and
the requested path, decide whether the request may proceed. Nothing here
touches Flask or the database, so it can be exercised on its own.
"""

from dataclasses import dataclass
from urllib.parse import urlencode

ALLOW = 'allow'
REDIRECT = 'redirect'
REJECT = 'reject'


@dataclass(frozen=True)
class Decision:
    kind: str
    location: str = None
    status: int = None

    @property
    def allowed(self):
        return self.kind == ALLOW


ALLOWED = Decision(ALLOW)
REJECT_UNAUTHORIZED = Decision(REJECT, status=401)


class AuthorizationPolicy:
    """Route-level access rules, evaluated in order by `decide`."""

    def __init__(self, public_paths=('/', '/login', '/register', '/blogs'),
                 public_path_prefixes=('/blogs/',),
                 public_api_prefixes=('/api/auth', '/api/blogs'),
                 login_path='/login', home_path='/dashboard', admin_prefix='/admin'):
        self.public_paths = frozenset(public_paths)
        self.public_path_prefixes = tuple(public_path_prefixes)
        self.public_api_prefixes = tuple(public_api_prefixes)
        self.login_path = login_path
        self.home_path = home_path
        self.admin_prefix = admin_prefix

    @classmethod
    def from_config(cls, config):
        return cls(
            public_paths=config['PUBLIC_PATHS'],
            public_path_prefixes=config['PUBLIC_PATH_PREFIXES'],
            public_api_prefixes=config['PUBLIC_API_PREFIXES'],
            login_path=config['LOGIN_PATH'],
            home_path=config['HOME_PATH'],
        )

    def is_public(self, path):
        if path in self.public_paths:
            return True
        return path.startswith(self.public_path_prefixes + self.public_api_prefixes)

    def login_redirect(self, path):
        return Decision(REDIRECT, location=f'{self.login_path}?{urlencode({"next": path})}')

    def decide(self, claims, path):
        if self.is_public(path):
            return ALLOWED
        if claims is None:
            return self.login_redirect(path)
        if path.startswith(self.admin_prefix) and not claims.is_admin:
            return Decision(REDIRECT, location=self.home_path)
        return ALLOWED

    def decide_admin_api(self, claims):
        """Handler-level check for admin API routes, independent of `decide`."""
        if claims is not None and claims.is_admin:
            return ALLOWED
        return REJECT_UNAUTHORIZED
