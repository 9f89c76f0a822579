# backend/gearguard/domain/errors.py


class AuthError(Exception):
    """Base for credential check failures; the HTTP layer never tells them apart."""

    reason = "auth_failed"


class InvalidCredentials(AuthError):
    reason = "invalid_credentials"

    def __init__(self):
        super().__init__("Invalid credentials")


class AccountDeactivated(AuthError):
    reason = "account_deactivated"

    def __init__(self):
        super().__init__("Account is deactivated")
