"""Pagination — limit/offset resolution and opaque page tokens."""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, NamedTuple

from .config import DEFAULT_LIMIT
from .exceptions import InvalidPageTokenError
from .responses import PageLinks, PaginationBlock


class PageRequest(NamedTuple):
    limit: int
    offset: int


class Pagination:
    """Resolve paging parameters and derive page tokens.

    Every token is a base64 encoded ``{"limit": n, "offset": m}`` document,
    derived independently from ``(limit, offset, total)``.
    """

    def __init__(self, default_limit: int = DEFAULT_LIMIT) -> None:
        self.default_limit = default_limit

    def parse(
        self,
        query_params: dict[str, Any],
        *,
        offset_key: str = "offset",
        limit_key: str = "limit",
        page_key: str = "page",
    ) -> PageRequest:
        """Resolve limit/offset from query params; a page token wins."""
        page = query_params.get(page_key)
        if page:
            return self.decode_page(page)

        limit = self.default_limit
        raw_limit = query_params.get(limit_key)
        if raw_limit not in (None, ""):
            try:
                limit = max(1, int(raw_limit))
            except (TypeError, ValueError):
                limit = self.default_limit

        offset = 0
        raw_offset = query_params.get(offset_key)
        if raw_offset not in (None, ""):
            try:
                offset = max(0, int(raw_offset))
            except (TypeError, ValueError):
                offset = 0
        return PageRequest(limit=limit, offset=offset)

    @staticmethod
    def encode_page(limit: int, offset: int) -> str:
        """Encode a page position to a base64 token."""
        encoded = base64.b64encode(
            json.dumps({"limit": limit, "offset": offset}, sort_keys=True).encode(
                "utf-8"
            )
        )
        return encoded.decode("ascii")

    @staticmethod
    def decode_page(page: str) -> PageRequest:
        """Decode a token produced by :meth:`encode_page`."""
        try:
            data = json.loads(base64.b64decode(page, validate=True).decode("utf-8"))
            limit, offset = int(data["limit"]), int(data["offset"])
            if limit < 1 or offset < 0:
                raise ValueError(f"limit={limit} offset={offset} out of range")
            return PageRequest(limit=limit, offset=offset)
        except (
            binascii.Error,
            UnicodeDecodeError,
            json.JSONDecodeError,
            KeyError,
            TypeError,
            ValueError,
        ) as e:
            raise InvalidPageTokenError(f"Invalid page token {page!r}") from e

    def current(self, limit: int, offset: int) -> str:
        return self.encode_page(limit, offset)

    def previous(self, limit: int, offset: int) -> str | None:
        if offset <= 0:
            return None
        return self.encode_page(limit, max(0, offset - limit))

    def next(self, limit: int, offset: int, total: int) -> str | None:
        if offset + limit >= total:
            return None
        return self.encode_page(limit, offset + limit)

    def first(self, limit: int, offset: int) -> str | None:
        if offset <= 0:
            return None
        return self.encode_page(limit, 0)

    def last(self, limit: int, total: int) -> str:
        if total <= 0:
            return self.encode_page(limit, 0)
        return self.encode_page(limit, ((total - 1) // limit) * limit)

    def build(self, limit: int, offset: int, total: int, count: int) -> PaginationBlock:
        """Build the pagination block; ``count`` is the size of this page."""
        return PaginationBlock(
            total=count,
            page=PageLinks(
                current=self.current(limit, offset),
                prev=self.previous(limit, offset),
                next=self.next(limit, offset, total),
                first=self.first(limit, offset),
                last=self.last(limit, total),
            ),
        )
