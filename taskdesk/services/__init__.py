from taskdesk.services.auth import Scope, get_token_verifier, require_roles, set_token_verifier, verify_token
from taskdesk.services.middleware import RequestLoggingMiddleware
from taskdesk.services.service import Service

__all__ = [
    "get_token_verifier",
    "RequestLoggingMiddleware",
    "require_roles",
    "Scope",
    "Service",
    "set_token_verifier",
    "verify_token",
]
