"""
Blog Blueprint

Public reading pages, the published-only blog API and the logo image.
"""

from flask import Blueprint

blog_bp = Blueprint('blog', __name__)

from inkwell.blog import routes  # noqa: E402, F401
