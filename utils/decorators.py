from __future__ import annotations
from functools import wraps
from flask import request, g, abort, current_app

from models.account import Role
from utils.security import InvalidAccessToken


def jwt_required():
    """
    Require a valid bearer access token. The identity comes from the token
    claims alone (no database lookup) and is exposed as g.current_claims,
    g.current_account_id and g.current_role.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            auth = request.headers.get("Authorization", "")
            if not auth.startswith("Bearer "):
                abort(401, description="Missing or invalid Authorization header")
            token = auth.split(" ", 1)[1].strip()
            signer = current_app.extensions["token_signer"]
            try:
                claims = signer.decode_access_token(token)
            except InvalidAccessToken as e:
                abort(401, description=str(e))

            # roles are a closed set; anything else is not a token we issued
            try:
                role = Role(claims.get("role"))
            except ValueError:
                abort(401, description="Invalid token: unknown role")

            g.current_claims = claims
            g.current_account_id = claims["sub"]
            g.current_role = role
            return fn(*args, **kwargs)

        return wrapper

    return decorator
