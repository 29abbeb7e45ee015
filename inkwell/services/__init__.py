"""
Services Package

Business rules for users, posts and site settings. Route handlers stay
thin and delegate here; failures surface as inkwell.errors types.
"""

from inkwell.services.markdown import render_markdown

__all__ = ['render_markdown']
