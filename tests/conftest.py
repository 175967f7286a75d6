import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tome.core.db import Database  # noqa: E402
from tome.core.settings import WikiSettings  # noqa: E402
from tome.domain.wiki.commands import PageDefinition  # noqa: E402
from tome.domain.wiki.permissions import INHERIT, PUBLIC  # noqa: E402
from tome.infrastructure.wiki.pages import PageRepository  # noqa: E402


# 結合テストで使うページ階層（/normal/sub/perm 以下は special 権限）
SEED_PAGES = [
    ("/", "Welcome to Tome", "Congratulations, you've successfully setup your Tome wiki!", PUBLIC, PUBLIC),
    ("/normal", "Normal Wiki Page", "A normal page.", INHERIT, INHERIT),
    ("/normal/sub", "Sub Wiki Page", "A sub page.", INHERIT, INHERIT),
    ("/normal/sub/perm", "Perm Sub Wiki Page", "A page with permissions.", "special", "special"),
    ("/normal/sub/perm/inherited", "Inherited Perm Sub Wiki Page", "Inherits permissions.", INHERIT, INHERIT),
]


@pytest.fixture
def settings():
    """インメモリSQLiteを使うテスト用設定"""
    return WikiSettings(database_uri="sqlite://")


@pytest.fixture
def database(settings):
    """スキーマ作成済みのデータベースを提供するfixture"""
    db = Database(settings).open()
    db.create_schema()
    try:
        yield db
    finally:
        db.drop_schema()
        db.close()


@pytest.fixture
def repository(database):
    return PageRepository(database)


@pytest.fixture
def seeded_repository(repository):
    for path, title, body, action_view, action_modify in SEED_PAGES:
        repository.create_page(
            PageDefinition(
                path=path,
                title=title,
                body=body,
                action_view=action_view,
                action_modify=action_modify,
            )
        )
    return repository
