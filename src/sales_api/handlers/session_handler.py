"""
Session routes passing sign-in, profile and sign-out through to the auth provider.
"""

from aws_lambda_powertools.event_handler import Response

from sales_api.handlers.utils.dependencies import get_services
from sales_api.handlers.utils.observability import logger, tracer
from sales_api.handlers.utils.responses import ok, parse_body
from sales_api.handlers.utils.rest_api_resolver import PROFILE_PATH, SIGNIN_PATH, SIGNOUT_PATH, app
from sales_api.models.input import SignInRequest
from sales_api.security.auth import AUTH_MIDDLEWARES


@app.post(SIGNIN_PATH)
@tracer.capture_method
def sign_in() -> Response:
    """
    Start a session with email and password.

    Returns:
        Envelope carrying the user and its tokens
    """
    request = parse_body(app.current_event.body, SignInRequest)
    session = get_services().auth_provider.sign_in(request.email, request.password)

    logger.info("User signed in", extra={"user_id": session.user.get('user_id')})
    return ok(session)


@app.get(PROFILE_PATH, middlewares=AUTH_MIDDLEWARES)
@tracer.capture_method
def get_profile() -> Response:
    return ok(app.context['user'])


@app.post(SIGNOUT_PATH, middlewares=AUTH_MIDDLEWARES)
@tracer.capture_method
def sign_out() -> Response:
    user = app.context['user']
    get_services().auth_provider.sign_out(app.context['access_token'])

    logger.info("User signed out", extra={"user_id": user.user_id})
    return ok({"message": "Signed out successfully"})
