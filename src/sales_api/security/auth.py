"""
Authentication against an Amazon Cognito user pool.

This module provides the session operations the API exposes (password
sign-in, profile lookup, global sign-out) and the route middleware that
resolves the bearer token of a protected request into the calling user.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

import boto3
from aws_lambda_powertools.event_handler import APIGatewayRestResolver, Response
from aws_lambda_powertools.event_handler.middlewares import NextMiddleware
from aws_lambda_powertools.metrics import MetricUnit
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, Field

from sales_api.handlers.utils.errors import AuthenticationError, ExternalServiceError
from sales_api.handlers.utils.observability import logger, metrics, tracer
from sales_api.models.output import SignInOutput

# Cognito error codes that mean the caller presented bad or unusable credentials
REJECTED_CREDENTIAL_CODES = frozenset({
    'NotAuthorizedException',
    'UserNotFoundException',
    'UserNotConfirmedException',
    'PasswordResetRequiredException',
})

BEARER_PREFIX = 'bearer '


class AuthenticatedUser(BaseModel):
    """User resolved from a valid access token."""

    user_id: str = Field(description="Stable user identifier (the Cognito sub)")
    username: str
    email: Optional[str] = None
    attributes: Dict[str, str] = Field(default_factory=dict)


@runtime_checkable
class AuthProvider(Protocol):
    """Capabilities the API needs from the authentication provider."""

    def sign_in(self, email: str, password: str) -> SignInOutput:
        ...

    def get_user(self, access_token: str) -> AuthenticatedUser:
        ...

    def sign_out(self, access_token: str) -> None:
        ...


def _user_from_response(response: Dict[str, Any]) -> AuthenticatedUser:
    attributes = {attr['Name']: attr['Value'] for attr in response.get('UserAttributes', [])}
    return AuthenticatedUser(
        user_id=attributes.get('sub', response['Username']),
        username=response['Username'],
        email=attributes.get('email'),
        attributes=attributes,
    )


class CognitoAuthProvider:
    """
    Cognito-backed auth provider.

    Sign-in uses the ``USER_PASSWORD_AUTH`` flow of a public app client, and
    every token check is a ``GetUser`` call, so revoked tokens are rejected
    as soon as Cognito revokes them.
    """

    def __init__(self, app_client_id: str, region: str = "us-east-1", client: Any = None):
        """
        Initialize the Cognito auth provider.

        Args:
            app_client_id: Cognito user pool app client id
            region: AWS region of the user pool
            client: Optional pre-built ``cognito-idp`` client
        """
        self.app_client_id = app_client_id
        self.region = region
        self.client = client or boto3.client('cognito-idp', region_name=region)

        logger.info("Cognito auth provider initialized", extra={
            "app_client_id": app_client_id,
            "region": region,
        })

    def _translate_error(self, error: ClientError, operation: str) -> Exception:
        code = error.response.get('Error', {}).get('Code', 'Unknown')
        message = error.response.get('Error', {}).get('Message', str(error))

        if code in REJECTED_CREDENTIAL_CODES:
            metrics.add_metric(name="AuthenticationRejected", unit=MetricUnit.Count, value=1)
            logger.info("Cognito rejected credentials", extra={"operation": operation, "error_code": code})
            return AuthenticationError(message)

        logger.error("Cognito call failed", extra={"operation": operation, "error_code": code})
        return ExternalServiceError(message=message, service_name="cognito-idp")

    @tracer.capture_method
    def sign_in(self, email: str, password: str) -> SignInOutput:
        """
        Authenticate a user by email and password.

        Raises:
            AuthenticationError: If Cognito rejects the credentials
            ExternalServiceError: If Cognito cannot be reached or fails otherwise
        """
        try:
            response = self.client.initiate_auth(
                ClientId=self.app_client_id,
                AuthFlow='USER_PASSWORD_AUTH',
                AuthParameters={'USERNAME': email, 'PASSWORD': password},
            )
        except ClientError as e:
            raise self._translate_error(e, "initiate_auth") from e
        except BotoCoreError as e:
            raise ExternalServiceError(message=str(e), service_name="cognito-idp") from e

        result = response.get('AuthenticationResult')
        if not result:
            # a challenge (new password, MFA) is pending; this API has no flow for it
            challenge = response.get('ChallengeName', 'UNKNOWN')
            logger.warning("Sign-in requires a challenge", extra={"challenge": challenge})
            raise AuthenticationError(f"Sign-in requires challenge {challenge}")

        user = self.get_user(result['AccessToken'])
        metrics.add_metric(name="SignInSucceeded", unit=MetricUnit.Count, value=1)

        return SignInOutput(
            user=user.model_dump(),
            access_token=result['AccessToken'],
            id_token=result.get('IdToken'),
            refresh_token=result.get('RefreshToken'),
            expires_in=result.get('ExpiresIn'),
            token_type=result.get('TokenType', 'Bearer'),
        )

    @tracer.capture_method
    def get_user(self, access_token: str) -> AuthenticatedUser:
        try:
            response = self.client.get_user(AccessToken=access_token)
        except ClientError as e:
            raise self._translate_error(e, "get_user") from e
        except BotoCoreError as e:
            raise ExternalServiceError(message=str(e), service_name="cognito-idp") from e
        return _user_from_response(response)

    @tracer.capture_method
    def sign_out(self, access_token: str) -> None:
        """Revoke every token issued to the user of ``access_token``."""
        try:
            self.client.global_sign_out(AccessToken=access_token)
        except ClientError as e:
            raise self._translate_error(e, "global_sign_out") from e
        except BotoCoreError as e:
            raise ExternalServiceError(message=str(e), service_name="cognito-idp") from e
        metrics.add_metric(name="SignOutSucceeded", unit=MetricUnit.Count, value=1)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token of an ``Authorization: Bearer <token>`` header value, or None."""
    if not authorization:
        return None
    if not authorization.lower().startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


def require_auth(app: APIGatewayRestResolver, next_middleware: NextMiddleware) -> Response:
    """
    Route middleware resolving the bearer token before the route body runs.

    The resolved user and token are appended to ``app.context`` under
    ``user`` and ``access_token``.

    Raises:
        AuthenticationError: If the token is absent or rejected by the provider
    """
    # imported here, dependencies imports this module's provider
    from sales_api.handlers.utils.dependencies import get_services

    headers = app.current_event.headers or {}
    token = extract_bearer_token(headers.get('Authorization') or headers.get('authorization'))
    if token is None:
        metrics.add_metric(name="MissingBearerToken", unit=MetricUnit.Count, value=1)
        raise AuthenticationError("Missing bearer token")

    user = get_services().auth_provider.get_user(token)
    tracer.put_annotation("user_id", user.user_id)
    app.append_context(user=user, access_token=token)

    return next_middleware(app)


AUTH_MIDDLEWARES: List = [require_auth]
