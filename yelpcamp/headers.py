"""
Security response headers.

A per-request CSP nonce is generated before the request is handled and the
headers are applied via @app.after_request to every response, before the
body leaves the application. The CSP allow-lists come from config
(``CSP_*_SOURCES``); adding an external asset host means extending them.
"""

import secrets
from typing import Dict, List

from flask import Flask, g, request

from yelpcamp.context import get_state


def generate_csp_nonce() -> str:
    """
    Generate a cryptographically random nonce for Content Security Policy.

    32 bytes = 256 bits of entropy, base64url-encoded.
    """
    return secrets.token_urlsafe(32)


def build_csp_directives(config, nonce: str) -> Dict[str, List[str]]:
    """Directive name -> source list. An empty list renders as 'none'."""
    return {
        'default-src': [],
        'connect-src': ["'self'", *config['CSP_CONNECT_SOURCES']],
        'script-src': ["'self'", f"'nonce-{nonce}'", *config['CSP_SCRIPT_SOURCES']],
        'style-src': ["'self'", "'unsafe-inline'", *config['CSP_STYLE_SOURCES']],
        'worker-src': ["'self'", 'blob:'],
        'object-src': [],
        'img-src': ["'self'", 'blob:', 'data:', *config['CSP_IMG_SOURCES']],
        'font-src': ["'self'", *config['CSP_FONT_SOURCES']],
        'frame-ancestors': [],
        'form-action': ["'self'"],
        'base-uri': ["'self'"],
    }


def render_csp(directives: Dict[str, List[str]]) -> str:
    parts = []
    for name, sources in directives.items():
        value = ' '.join(sources) if sources else "'none'"
        parts.append(f'{name} {value}')
    return '; '.join(parts)


def init_security_headers(app: Flask) -> None:
    """Register security header hooks on the Flask app."""

    @app.before_request
    def set_csp_nonce() -> None:
        """Generate a per-request CSP nonce and store in Flask's g object."""
        g.csp_nonce = generate_csp_nonce()
        get_state().completed.append('security_headers')

    @app.context_processor
    def inject_csp_nonce() -> dict:
        """Make the CSP nonce available in all Jinja2 templates."""
        return {'csp_nonce': g.get('csp_nonce', '')}

    @app.after_request
    def set_security_headers(response):
        """Apply security headers to every response."""
        # Responses that failed before the nonce hook ran still get a policy.
        nonce = g.get('csp_nonce') or generate_csp_nonce()

        directives = build_csp_directives(app.config, nonce)
        response.headers['Content-Security-Policy'] = render_csp(directives)

        # MIME-sniffing off.
        response.headers['X-Content-Type-Options'] = 'nosniff'
        # Legacy clickjacking protection; frame-ancestors covers current browsers.
        response.headers['X-Frame-Options'] = 'DENY'

        # Forces HTTPS for a year. Skipped in debug to keep localhost usable.
        if not app.debug:
            response.headers['Strict-Transport-Security'] = (
                'max-age=31536000; includeSubDomains'
            )

        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        response.headers['X-DNS-Prefetch-Control'] = 'off'
        response.headers['Cross-Origin-Opener-Policy'] = 'same-origin'
        response.headers['Cross-Origin-Resource-Policy'] = 'same-origin'
        response.headers['X-Permitted-Cross-Domain-Policies'] = 'none'

        # Pages may show the logged-in user; only static assets are cacheable.
        if not request.path.startswith('/static/'):
            response.headers['Cache-Control'] = (
                'no-store, no-cache, must-revalidate, max-age=0'
            )
            response.headers['Pragma'] = 'no-cache'

        response.headers.pop('Server', None)
        response.headers.pop('X-Powered-By', None)

        return response
