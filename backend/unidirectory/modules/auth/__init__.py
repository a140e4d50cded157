# Authentication module

from unidirectory.modules.auth.dependencies import (
    get_token_issuer,
    require_auth,
)

__all__ = [
    "get_token_issuer",
    "require_auth",
]
