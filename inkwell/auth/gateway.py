"""
Request Gateway

Single chokepoint run before every request. It reads the access token,
asks the AuthorizationPolicy for a decision and either lets the request
through or answers it with a redirect or a 401.
"""

import logging

from flask import g, jsonify, redirect, request

from inkwell.auth.policy import REDIRECT, REJECT
from inkwell.auth.security import token_from_request

logger = logging.getLogger(__name__)


class RequestGateway:
    """Flask extension wiring an AuthorizationPolicy into before_request."""

    def __init__(self, policy, issuer, cookie_name):
        self.policy = policy
        self.issuer = issuer
        self.cookie_name = cookie_name

    def init_app(self, app):
        app.extensions['request_gateway'] = self
        app.before_request(self.check_request)

    def check_request(self):
        if request.endpoint == 'static':
            return None

        claims = self.issuer.validate(token_from_request(request, self.cookie_name))
        g.token_claims = claims

        decision = self.policy.decide(claims, request.path)
        if decision.kind == REDIRECT:
            logger.debug('Gateway redirect %s -> %s', request.path, decision.location)
            return redirect(decision.location)
        if decision.kind == REJECT:
            return jsonify({'error': 'Unauthorized'}), decision.status
        return None
