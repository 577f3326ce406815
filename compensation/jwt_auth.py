"""
JWT Authentication for the commission API.

Bearer tokens are issued by Supabase Auth and verified here with the shared
HS256 secret. The role used for access checks is read from the token's
user_metadata, so no database lookup happens on authenticated requests.
"""

import jwt
from functools import wraps
from dataclasses import dataclass
from flask import request, jsonify, g, current_app


class JWTAuthError(Exception):
    """Custom exception for JWT authentication errors"""
    def __init__(self, message, status_code=401):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


@dataclass
class UserContext:
    """
    User identity extracted from a verified JWT token.
    """
    id: str          # From JWT 'sub' claim (Supabase UUID)
    email: str       # From JWT 'email' claim
    role: str        # From JWT 'user_metadata.role' claim (REP/FINANCE/ADMIN)

    def can_read_all_commissions(self):
        return self.role in current_app.config.get('COMMISSION_READ_ALL_ROLES', ('FINANCE', 'ADMIN'))

    def can_read_commissions_of(self, user_id):
        """Reps may only read their own numbers; finance and admin may read anyone's."""
        return self.id == user_id or self.can_read_all_commissions()


def extract_token_from_header():
    """
    Extracts the JWT token from the Authorization header.

    Expected format: "Authorization: Bearer <token>"

    Raises:
        JWTAuthError: If Authorization header is missing or malformed
    """
    auth_header = request.headers.get('Authorization')

    if not auth_header:
        raise JWTAuthError("Missing Authorization header", 401)

    parts = auth_header.split()

    if len(parts) != 2 or parts[0].lower() != 'bearer':
        raise JWTAuthError("Invalid Authorization header format. Expected 'Bearer <token>'", 401)

    return parts[1]


def verify_supabase_token(token):
    """
    Verifies a Supabase JWT token and returns its payload.

    Raises:
        JWTAuthError: If token is invalid, expired, or verification fails
    """
    jwt_secret = current_app.config.get('SUPABASE_JWT_SECRET')

    if not jwt_secret:
        raise JWTAuthError("SUPABASE_JWT_SECRET not configured", 500)

    try:
        return jwt.decode(
            token,
            jwt_secret,
            algorithms=['HS256'],
            audience='authenticated',  # Supabase default audience
            options={
                'verify_exp': True,
                'verify_aud': True,
            }
        )
    except jwt.ExpiredSignatureError:
        raise JWTAuthError("Token has expired", 401)
    except jwt.InvalidAudienceError:
        raise JWTAuthError("Invalid token audience", 401)
    except jwt.InvalidTokenError as e:
        raise JWTAuthError(f"Invalid token: {str(e)}", 401)


def create_user_context_from_token(payload):
    """
    Builds a UserContext from a decoded token payload.

    Raises:
        JWTAuthError: If required claims are missing
    """
    user_id = payload.get('sub')
    email = payload.get('email')

    user_metadata = payload.get('user_metadata') or {}
    role = user_metadata.get('role') or current_app.config.get('REP_ROLE', 'REP')

    if not user_id:
        raise JWTAuthError("Token missing 'sub' claim", 401)

    if not email:
        raise JWTAuthError("Token missing 'email' claim", 401)

    return UserContext(id=user_id, email=email, role=role)


def require_jwt(f):
    """
    Decorator to protect routes with JWT authentication.

    On success the UserContext is available as g.current_user.

    Error Responses:
        401: Missing, invalid, or expired token
        500: Server error during authentication
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            token = extract_token_from_header()
            payload = verify_supabase_token(token)
            g.current_user = create_user_context_from_token(payload)
        except JWTAuthError as e:
            return jsonify({"success": False, "error": e.message}), e.status_code

        return f(*args, **kwargs)

    return decorated_function


def finance_admin_required(f):
    """
    Decorator to require FINANCE or ADMIN role for route access.

    Must be used AFTER @require_jwt decorator.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = getattr(g, 'current_user', None)

        if not user:
            return jsonify({"success": False, "error": "Authentication required."}), 401

        if not user.can_read_all_commissions():
            return jsonify({"success": False, "error": "Permission denied: Finance or Admin access required."}), 403

        return f(*args, **kwargs)

    return decorated_function


def get_current_user():
    """Returns the UserContext of the current request, or None."""
    return getattr(g, 'current_user', None)
