import pytest
from flask import Flask

from tome.domain.wiki.exceptions import (
    PermissionResolutionError,
    WikiAccessDeniedError,
    WikiMultipleResultsError,
    WikiOperationError,
    WikiPageExistsError,
    WikiPageNotFoundError,
    WikiValidationError,
)
from tome.domain.wiki.permissions import ViewerContext
from tome.webapp import TomeWiki, current_wiki
from tome.webapp.error_handlers import error_payload, status_for

ERRORS = {
    "not-found": WikiPageNotFoundError("No page found for url '/dne'."),
    "validation": WikiValidationError("title", "Title is required."),
    "conflict": WikiPageExistsError("/normal"),
    "denied": WikiAccessDeniedError("Not allowed to view '/secret'."),
    "multiple": WikiMultipleResultsError("page"),
    "consistency": PermissionResolutionError("/x", "view"),
    "internal": WikiOperationError("Failed to create page '/x'."),
}


@pytest.fixture
def app():
    app = Flask(__name__)
    app.config.update(
        TESTING=True,
        TOME_DATABASE_URI="sqlite://",
        TOME_CREATE_SCHEMA=True,
        TOME_LOG_LEVEL="warning",
    )
    wiki = TomeWiki(app)

    @app.route("/raise/<name>")
    def raise_error(name):
        raise ERRORS[name]

    @app.route("/wiki/", defaults={"path": "/"})
    @app.route("/wiki/<path:path>")
    def show_page(path):
        page = current_wiki().service.get_page(path, ViewerContext.anonymous())
        return current_wiki().service.serialize_page(page)

    yield app
    wiki.shutdown()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.mark.parametrize(
    "name, status",
    [
        ("not-found", 404),
        ("validation", 400),
        ("conflict", 409),
        ("denied", 403),
        ("multiple", 500),
        ("consistency", 500),
        ("internal", 500),
    ],
)
def test_status_codes(client, name, status):
    response = client.get(f"/raise/{name}")

    assert response.status_code == status
    assert response.is_json


def test_validation_envelope_names_field(client):
    response = client.get("/raise/validation")

    assert response.get_json() == {
        "error": "validation",
        "message": "Title is required.",
        "field": "title",
    }


def test_unexpected_5xx_hides_message(client):
    response = client.get("/raise/consistency")

    assert response.get_json() == {"error": "consistency", "message": "Internal Server Error"}


def test_sanitized_operation_error_keeps_message():
    error = ERRORS["internal"]

    assert status_for(error) == 500
    assert error_payload(error) == {"error": "internal", "message": "Failed to create page '/x'."}


def test_extension_serves_pages(app, client):
    from tome.domain.wiki.commands import PageDefinition

    repository = current_wiki_from(app).repository
    repository.create_page(PageDefinition(path="/", title="Home", body="hi", action_view="*", action_modify="*"))

    response = client.get("/wiki/")
    missing = client.get("/wiki/dne")

    assert response.status_code == 200
    assert response.get_json()["actions"] == {"wikiView": "*", "wikiModify": "*"}
    assert missing.status_code == 404
    assert missing.get_json()["error"] == "not_found"


def test_shutdown_closes_database(app):
    wiki = current_wiki_from(app)

    wiki.shutdown()

    assert wiki.database.is_open is False


def current_wiki_from(app):
    with app.app_context():
        return current_wiki()
