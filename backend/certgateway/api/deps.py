import secrets
from typing import Annotated

from fastapi import Depends, Header

from certgateway.core.config import settings
from certgateway.core.errors import AuthError
from certgateway.core.pool import QueryExecutor, get_query_executor


def verify_api_key(
    x_api_key: Annotated[str | None, Header(alias="x-api-key")] = None,
) -> None:
    """Require x-api-key to equal API_KEY (constant-time compare)."""
    if not x_api_key:
        raise AuthError()
    if not secrets.compare_digest(
        x_api_key.encode("utf-8"), settings.API_KEY.encode("utf-8")
    ):
        raise AuthError()


def get_executor() -> QueryExecutor:
    return get_query_executor()


ExecutorDep = Annotated[QueryExecutor, Depends(get_executor)]
ApiKeyDep = Depends(verify_api_key)
