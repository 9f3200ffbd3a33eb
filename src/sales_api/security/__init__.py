"""
Security Module for the sales API.

This module provides the Cognito auth provider and the bearer token
middleware guarding protected routes.
"""

from .auth import (
    AUTH_MIDDLEWARES,
    AuthenticatedUser,
    AuthProvider,
    CognitoAuthProvider,
    extract_bearer_token,
    require_auth,
)

__all__ = [
    'AUTH_MIDDLEWARES',
    'AuthenticatedUser',
    'AuthProvider',
    'CognitoAuthProvider',
    'extract_bearer_token',
    'require_auth',
]
