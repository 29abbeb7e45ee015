"""Create an admin account, or promote an existing user to admin.

Usage: python scripts/make_admin.py EMAIL PASSWORD [NAME]
"""
import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from inkwell import create_app
from inkwell.extensions import db
from inkwell.models import User, ROLE_ADMIN
from inkwell.services.users import ensure_admin

if len(sys.argv) < 3:
    print(__doc__)
    sys.exit(1)

email, password = sys.argv[1], sys.argv[2]
name = sys.argv[3] if len(sys.argv) > 3 else 'Admin'

app = create_app()

with app.app_context():
    user = User.query.filter_by(email=email.strip().lower()).first()

    if not user:
        ensure_admin(email, password, name=name)
        print("New admin user created")
    else:
        user.role = ROLE_ADMIN
        db.session.commit()
        print("Existing user promoted to admin")
