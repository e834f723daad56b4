"""Error translation for Supabase queries."""

from typing import Any, Protocol

import httpx
from postgrest.exceptions import APIError

from meal_analytics.domain.errors import StoreUnavailable


class ExecutableQuery(Protocol):
    """A Supabase query builder ready to run."""

    def execute(self) -> Any:
        """Run the query and return the API response."""


def execute(query: ExecutableQuery, action: str) -> Any:
    """Run a query, turning transport and API failures into StoreUnavailable."""
    try:
        return query.execute()
    except (APIError, httpx.HTTPError) as exc:
        raise StoreUnavailable(f"Supabase {action} failed") from exc
