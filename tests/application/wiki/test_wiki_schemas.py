from datetime import datetime, timedelta, timezone

from tome.application.wiki.schemas import page_view_schema, revision_list_schema
from tome.domain.wiki.entities import PageActions, PageView, RevisionEntry


def _page(**overrides):
    values = dict(
        page_id=1,
        path="/bar",
        title="Bar Page",
        body="The bar page.",
        revision_id=3,
        created=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        edited=datetime(2024, 1, 3, 3, 4, 5, tzinfo=timezone.utc),
        actions=PageActions(wiki_view="*", wiki_modify="special"),
    )
    values.update(overrides)
    return PageView(**values)


def test_page_view_uses_camel_case_action_keys():
    data = page_view_schema.dump(_page())

    assert data["actions"] == {"wikiView": "*", "wikiModify": "special"}
    assert "action_view" not in data


def test_timestamps_are_iso_utc_with_z_suffix():
    jst = timezone(timedelta(hours=9))
    data = page_view_schema.dump(_page(edited=datetime(2024, 1, 3, 12, 0, 0, tzinfo=jst)))

    assert data["created"] == "2024-01-02T03:04:05Z"
    assert data["edited"] == "2024-01-03T03:00:00Z"


def test_tombstone_body_is_serialized_as_none():
    data = page_view_schema.dump(_page(body=None))

    assert data["body"] is None


def test_revision_list():
    created = datetime(2024, 1, 2, tzinfo=timezone.utc)
    data = revision_list_schema.dump(
        [
            RevisionEntry(revision_id=1, page_id=1, body="v1", created=created),
            RevisionEntry(revision_id=2, page_id=1, body=None, created=created),
        ]
    )

    assert [entry["revision_id"] for entry in data] == [1, 2]
    assert data[1]["body"] is None
    assert data[0]["created"] == "2024-01-02T00:00:00Z"
