"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout
- GET  /auth/me

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived HS256 access tokens and opaque rotation (refresh) tokens
- Stores rotation tokens in DB so they can be revoked and rotated
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, g, current_app

from models.schemas.account import (
    RegisterSchema,
    LoginSchema,
    RefreshTokenSchema,
    AccountOutSchema,
    IdentityOutSchema,
)
from services.auth_service import AuthError, AuthResult
from api.errors import error_response
from utils.decorators import jwt_required

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_token_schema = RefreshTokenSchema()
account_out_schema = AccountOutSchema()
identity_out_schema = IdentityOutSchema()

# status and client-facing message for each failure reason
AUTH_ERRORS = {
    AuthError.DUPLICATE_EMAIL: (409, "Email already registered"),
    AuthError.INVALID_CREDENTIALS: (401, "Invalid email or password"),
    AuthError.ACCOUNT_INACTIVE: (401, "Account is inactive"),
    AuthError.INVALID_TOKEN: (401, "Invalid refresh token"),
    AuthError.TOKEN_INACTIVE: (401, "Refresh token expired or revoked"),
}


def auth_service():
    return current_app.extensions["auth_service"]


def token_response(result: AuthResult, status: int = 200):
    if not result.success:
        code, message = AUTH_ERRORS[result.error]
        return error_response(result.error.value, message, code)
    return jsonify(
        {
            "access_token": result.access_token,
            "refresh_token": result.refresh_token,
            "token_type": "bearer",
            "access_token_expires": result.access_token_expires.isoformat() + "Z",
            "expires_in": int(current_app.config["ACCESS_TOKEN_EXPIRES"].total_seconds()),
            "user": account_out_schema.dump(result.account),
        }
    ), status


@bp.post("/register")
def register():
    """
    Register a new account and return its first token pair.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, password, first_name, last_name]
          properties:
            email: { type: string }
            password: { type: string }
            first_name: { type: string }
            last_name: { type: string }
            phone: { type: string }
    responses:
      201:
        description: Created (returns tokens)
      409:
        description: Email already registered
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = register_schema.load(payload)
    result = auth_service().register(
        email=data["email"],
        password=data["password"],
        first_name=data["first_name"],
        last_name=data["last_name"],
        phone=data.get("phone"),
    )
    return token_response(result, status=201)


@bp.post("/login")
def login():
    """
    Login: return access_token and refresh_token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    data = login_schema.load(payload)
    return token_response(auth_service().login(data["email"], data["password"]))


@bp.post("/refresh")
def refresh():
    """
    Use a refresh token to obtain new access and refresh tokens (rotation).
    The presented refresh token is revoked.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refresh_token: { type: string }
    responses:
      200:
        description: OK (returns new tokens)
      401:
        description: Invalid, expired or revoked refresh token
    """
    payload = request.get_json(silent=True) or {}
    data = refresh_token_schema.load(payload)
    return token_response(auth_service().refresh_token(data["refresh_token"]))


@bp.post("/logout")
def logout():
    """
    logout: revokes the refresh token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refresh_token: { type: string }
    responses:
      200:
        description: Logged out
      400:
        description: Unknown (INVALID_TOKEN) or already expired/revoked (TOKEN_INACTIVE) refresh token
    """
    payload = request.get_json(silent=True) or {}
    data = refresh_token_schema.load(payload)
    result = auth_service().logout(data["refresh_token"])
    if not result.success:
        _, message = AUTH_ERRORS[result.error]
        return error_response(result.error.value, message, 400)
    return jsonify({"message": "Logged out successfully"}), 200


@bp.get("/me")
@jwt_required()
def me():
    """
    Get current account info from the access token.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return jsonify({"data": identity_out_schema.dump(g.current_claims)}), 200
