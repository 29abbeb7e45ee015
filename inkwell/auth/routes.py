"""
Auth Routes

Form-based login/registration pages and their JSON counterparts.
"""

import logging

from flask import current_app, flash, g, jsonify, redirect, render_template, request, url_for

from inkwell.auth import auth_api_bp, auth_bp
from inkwell.errors import Conflict, InvalidCredentials, ValidationError
from inkwell.extensions import db
from inkwell.models import User
from inkwell.services import users as user_service

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _issuer():
    return current_app.extensions['token_issuer']


def _safe_next(target):
    """Only follow local redirects."""
    if target and target.startswith('/') and not target.startswith('//'):
        return target
    return None


def _set_auth_cookie(response, token):
    config = current_app.config
    response.set_cookie(
        config['AUTH_COOKIE_NAME'],
        token,
        max_age=config['JWT_EXPIRES_HOURS'] * 3600,
        httponly=True,
        samesite='Lax',
        secure=config['AUTH_COOKIE_SECURE'],
    )
    return response


def _clear_auth_cookie(response):
    response.delete_cookie(current_app.config['AUTH_COOKIE_NAME'])
    return response


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    """User registration page"""
    if g.get('token_claims'):
        return redirect(url_for('dashboard.dashboard'))

    if request.method == 'POST':
        name = request.form.get('name', '').strip()
        email = request.form.get('email', '').strip()
        password = request.form.get('password', '')
        confirm_password = request.form.get('confirm_password', '')

        if not email or '@' not in email:
            flash('Please provide a valid email address.', 'danger')
            return render_template('auth/register.html')

        if len(password) < MIN_PASSWORD_LENGTH:
            flash(f'Password must be at least {MIN_PASSWORD_LENGTH} characters long.', 'danger')
            return render_template('auth/register.html')

        if password != confirm_password:
            flash('Passwords do not match.', 'danger')
            return render_template('auth/register.html')

        try:
            user_service.create_user(email=email, password=password, name=name or None)
        except Conflict:
            flash('Email already registered. Please login or use another email.', 'danger')
            return render_template('auth/register.html')

        flash('Registration successful! Please login.', 'success')
        return redirect(url_for('auth.login'))

    return render_template('auth/register.html')


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Login page; on success the token is stored in an HttpOnly cookie"""
    next_page = _safe_next(request.values.get('next'))
    if g.get('token_claims'):
        return redirect(next_page or url_for('dashboard.dashboard'))

    if request.method == 'POST':
        email = request.form.get('email', '').strip()
        password = request.form.get('password', '')

        if not email or not password:
            flash('Please provide both email and password.', 'danger')
            return render_template('auth/login.html', next_page=next_page)

        try:
            token, user = _issuer().issue(email, password)
        except InvalidCredentials:
            flash('Invalid email or password. Please try again.', 'danger')
            return render_template('auth/login.html', next_page=next_page)

        flash(f'Welcome back, {user.name or user.email}!', 'success')
        response = redirect(next_page or url_for('dashboard.dashboard'))
        return _set_auth_cookie(response, token)

    return render_template('auth/login.html', next_page=next_page)


@auth_bp.route('/logout')
def logout():
    """Drop the auth cookie"""
    flash('You have been logged out successfully.', 'info')
    return _clear_auth_cookie(redirect(url_for('dashboard.index')))


@auth_api_bp.route('/login', methods=['POST'])
def api_login():
    data = request.get_json(silent=True) or {}
    email = data.get('email')
    password = data.get('password')
    if not email or not password:
        raise ValidationError('Email and password are required')

    token, user = _issuer().issue(email, password)
    response = jsonify({
        'access_token': token,
        'token_type': 'bearer',
        'user': user.to_dict(),
    })
    return _set_auth_cookie(response, token)


@auth_api_bp.route('/register', methods=['POST'])
def api_register():
    data = request.get_json(silent=True) or {}
    password = data.get('password') or ''
    if password and len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters long')

    user = user_service.create_user(
        email=data.get('email'),
        password=password,
        name=data.get('name'),
    )
    return jsonify(user.to_dict()), 201


@auth_api_bp.route('/logout', methods=['POST'])
def api_logout():
    return _clear_auth_cookie(jsonify({'success': True}))


@auth_api_bp.route('/session', methods=['GET'])
def api_session():
    """Who the presented token belongs to, or null."""
    claims = g.get('token_claims')
    user = db.session.get(User, claims.user_id) if claims else None
    return jsonify({'user': user.to_dict() if user else None})
