"""
Error taxonomy shared by the deploy and webhook endpoints.

Every error carries the HTTP status it maps to; handlers registered in
pushdeploy.main turn them into responses at the request boundary.
"""


class PushDeployError(Exception):
    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str = None, status_code: int = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ClientInputError(PushDeployError):
    """Missing or invalid request fields"""
    status_code = 400
    default_message = "Bad Request"


class PayloadError(PushDeployError):
    """Authenticated webhook body could not be parsed into an event"""
    status_code = 400
    default_message = "Bad Request"


class AuthError(PushDeployError):
    """Missing or invalid webhook signature"""
    status_code = 401
    default_message = "Unauthorized"


class NotFoundError(PushDeployError):
    status_code = 404
    default_message = "Not Found"


class UpstreamError(PushDeployError):
    """GitHub or Supabase rejected the call or was unreachable"""
    status_code = 500
    default_message = "Upstream service error"


class ConfigError(PushDeployError):
    """A required secret or credential is not configured"""
    status_code = 500
    default_message = "Service not configured"
