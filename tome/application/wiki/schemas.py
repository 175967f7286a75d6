"""Marshmallow schemas for wiki page payloads."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields

from tome.core.time import isoformat_z


class UtcDateTimeField(fields.Field):
    """Serialize datetimes as ISO 8601 UTC strings ending with ``Z``."""

    def _serialize(self, value: Any, attr: str | None, obj: Any, **kwargs) -> str | None:  # type: ignore[override]
        return isoformat_z(value)


class PageActionsSchema(Schema):
    wiki_view = fields.String(data_key="wikiView")
    wiki_modify = fields.String(data_key="wikiModify")


class PageViewSchema(Schema):
    page_id = fields.Integer()
    path = fields.String()
    title = fields.String()
    body = fields.String(allow_none=True)
    revision_id = fields.Integer()
    created = UtcDateTimeField()
    edited = UtcDateTimeField()
    actions = fields.Nested(PageActionsSchema)


class RevisionSchema(Schema):
    revision_id = fields.Integer()
    page_id = fields.Integer()
    body = fields.String(allow_none=True)
    created = UtcDateTimeField()


page_view_schema = PageViewSchema()
revision_list_schema = RevisionSchema(many=True)


__all__ = [
    "PageActionsSchema",
    "PageViewSchema",
    "RevisionSchema",
    "UtcDateTimeField",
    "page_view_schema",
    "revision_list_schema",
]
