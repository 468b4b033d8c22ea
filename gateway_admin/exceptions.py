"""
Plugin config admin exceptions.

Every failure the controller reports carries an HTTP-style status code and a
message. Routes and the CLI render them as ``{"error_msg": ...}``.
"""


class AdminError(Exception):
    """Base exception for admin API errors"""

    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error_msg": self.message}


class ClientError(AdminError):
    """Caller-fixable request error"""

    status_code = 400


class MissingConfiguration(ClientError):
    """Request carried no configuration body"""
    pass


class InvalidConfiguration(ClientError):
    """Configuration body has the wrong shape"""
    pass


class MissingId(ClientError):
    """Resource id required but not supplied"""
    pass


class UnexpectedId(ClientError):
    """Resource id supplied where the server assigns one"""
    pass


class IdMismatch(ClientError):
    """Path id and body id disagree"""
    pass


class SchemaViolation(ClientError):
    """Document failed schema validation"""
    pass


class InvalidPatchPath(ClientError):
    """Sub-path does not resolve inside the stored document"""
    pass


class ResourceInUse(ClientError):
    """Resource is still referenced by another resource"""
    pass


class DependencyError(AdminError):
    """Store or route snapshot failure"""

    status_code = 503


class ConcurrencyConflict(AdminError):
    """Conditional write lost against a concurrent modification"""

    status_code = 409
