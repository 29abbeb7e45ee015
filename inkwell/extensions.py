"""
Flask Extensions

Identity travels in a signed token rather than the Flask session; the
login manager resolves `current_user` from that token on each request.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager

# Database instance
db = SQLAlchemy()

# Login manager, fed by a request loader that reads the access token
login_manager = LoginManager()
