"""
Authentication errors raised by the login endpoint.
"""
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed


class InvalidCredentials(AuthenticationFailed):
    """
    Raised when a username/password pair does not match.

    The message never says which half was wrong so the login form cannot be
    used to discover existing usernames.
    """
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid username or password'
    default_code = 'INVALID_CREDENTIALS'
