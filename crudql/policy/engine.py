"""Paging policy.

``PagingPolicy`` turns whatever the caller asked for into the
:class:`~crudql.schema.statements.Limit` and
:class:`~crudql.schema.statements.Order` the compiler renders:

* **Default page** – no ``limit`` parameter means ``start=0`` and
  ``rows=page_size``.
* **Clamping** – ``rows`` never exceeds ``page_size_max``, whatever the
  caller sent.
* **Default order** – paginated reads are ordered by the primary key,
  ascending, unless the caller chose a column.

Request parameters use the names of the REST API: ``offset`` and
``limit`` for the page, ``sort`` and ``dir`` for the ordering::

    policy = PagingPolicy.from_settings(settings)
    limit = policy.limit_from({"offset": "50", "limit": "1000"})   # rows=500
    order = policy.order_from({"sort": "name", "dir": "desc"}, table.primary_key)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from crudql.errors import InvalidStatementError
from crudql.schema.statements import DEFAULT_PAGE_SIZE, Limit, Order

if TYPE_CHECKING:
    from crudql.config import CompilerSettings

logger = logging.getLogger(__name__)

OFFSET_PARAM = "offset"
LIMIT_PARAM = "limit"
SORT_PARAM = "sort"
DIRECTION_PARAM = "dir"


@dataclass(frozen=True)
class PagingPolicy:
    """Default and maximum page sizes.

    Attributes:
        page_size: Rows per page when the caller gives no limit.
        page_size_max: Upper bound on rows per page.
    """

    page_size: int = DEFAULT_PAGE_SIZE
    page_size_max: int = 500

    @classmethod
    def from_settings(cls, settings: CompilerSettings) -> PagingPolicy:
        return cls(page_size=settings.page_size, page_size_max=settings.page_size_max)

    # ------------------------------------------------------------------
    # Limit
    # ------------------------------------------------------------------

    def default_limit(self) -> Limit:
        return Limit(start=0, rows=self.page_size)

    def resolve_limit(self, limit: Limit | None) -> Limit:
        """Return ``limit`` (or the default page) clamped to ``page_size_max``."""
        if limit is None:
            return self.default_limit()
        clamped = limit.clamp(self.page_size_max)
        if clamped is not limit:
            logger.debug("Clamped page of %d rows to %d", limit.rows, self.page_size_max)
        return clamped

    def limit_from(self, params: Mapping[str, Any]) -> Limit:
        """Build a Limit from request parameters.

        Raises:
            InvalidStatementError: If ``offset`` or ``limit`` is not an integer.
        """
        start = self._int_param(params, OFFSET_PARAM, 0)
        rows = self._int_param(params, LIMIT_PARAM, self.page_size)
        return self.resolve_limit(Limit(start=start, rows=rows))

    # ------------------------------------------------------------------
    # Order
    # ------------------------------------------------------------------

    def resolve_order(self, order: Order | None, primary_key: str) -> Order:
        """Return ``order``, or primary key ascending when there is none."""
        return order if order is not None else Order(column=primary_key)

    def order_from(self, params: Mapping[str, Any], primary_key: str) -> Order:
        """Build an Order from request parameters.

        Raises:
            InvalidStatementError: If ``dir`` is neither ``asc`` nor ``desc``.
        """
        column = _first(params.get(SORT_PARAM)) or primary_key
        direction = _first(params.get(DIRECTION_PARAM)) or "ASC"
        return Order(column=column, direction=direction)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _int_param(params: Mapping[str, Any], name: str, default: int) -> int:
        raw = _first(params.get(name))
        if raw is None or raw == "":
            return default
        try:
            return int(raw)
        except (TypeError, ValueError) as exc:
            raise InvalidStatementError(
                f"Parameter '{name}' must be an integer, got '{raw}'.",
                details={"parameter": name, "value": raw},
            ) from exc


def _first(value: Any) -> Any:
    """Multi-valued query parameters arrive as lists; use the first value."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value
