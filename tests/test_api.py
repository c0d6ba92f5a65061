"""Tests for the HTTP surface: addresses resource and routing examples."""

import re
from unittest.mock import AsyncMock

import pytest
from hypothesis import HealthCheck, given, settings, strategies as st
from sqlalchemy.exc import OperationalError

from address_book_service.api.app import create_app
from address_book_service.exceptions import AddressStorageError
from address_book_service.models.schemas import NAME_MAX_LENGTH

ROW_MARKER = 'name="_method"'


def form_text(max_size):
    return st.text(
        alphabet=st.characters(blacklist_categories=('Cc', 'Cs')),
        max_size=max_size
    )


def create_address(client, name=None, street=None):
    data = {}
    if name is not None:
        data["address[name]"] = name
    if street is not None:
        data["address[street]"] = street
    return client.post("/addresses", data=data, follow_redirects=False)


def csrf_token(client):
    page = client.get("/username")
    match = re.search(r'name="authenticity_token" value="([0-9a-f]+)"', page.text)
    assert match, page.text
    return match.group(1)


class TestAddresses:
    """The addresses resource end to end against SQLite."""

    def test_empty_list(self, client):
        response = client.get("/addresses")

        assert response.status_code == 200
        assert "No addresses yet." in response.text

    def test_new_form(self, client):
        response = client.get("/addresses/new")

        assert response.status_code == 200
        assert 'name="address[name]"' in response.text
        assert 'name="address[street]"' in response.text

    def test_create_redirects_to_list(self, client):
        response = create_address(client, "Alice", "Main St")

        assert response.status_code == 303
        assert response.headers["location"] == "/addresses"

        listing = client.get("/addresses")
        assert "Alice" in listing.text
        assert "Main St" in listing.text
        assert 'action="/addresses/1"' in listing.text

    def test_create_follows_redirect(self, client):
        response = client.post("/addresses", data={"address[name]": "Bob"})

        assert response.status_code == 200
        assert "Bob" in response.text

    def test_create_with_overlong_name_redirects_to_form(self, client):
        response = create_address(client, "x" * (NAME_MAX_LENGTH + 1))

        assert response.status_code == 303
        assert response.headers["location"] == "/addresses/new"
        assert ROW_MARKER not in client.get("/addresses").text

    def test_create_ignores_unrelated_form_keys(self, client):
        response = client.post(
            "/addresses",
            data={"address[name]": "Carl", "name": "ignored", "utf8": "yes"},
            follow_redirects=False
        )

        assert response.headers["location"] == "/addresses"
        listing = client.get("/addresses").text
        assert "Carl" in listing
        assert "ignored" not in listing

    def test_delete(self, client):
        create_address(client, "Alice", "Main St")

        response = client.delete("/addresses/1", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/addresses"
        assert "Alice" not in client.get("/addresses").text

    def test_delete_unknown_id_is_not_found(self, client):
        response = client.delete("/addresses/999")

        assert response.status_code == 404
        assert "Address 999 not found" in response.text

    def test_delete_id_beyond_integer_range_is_not_found(self, client):
        response = client.delete("/addresses/99999999999999999999")

        assert response.status_code == 404
        assert "Address 99999999999999999999 not found" in response.text

    def test_override_delete_id_beyond_integer_range_is_not_found(self, client):
        response = client.post("/addresses/99999999999999999999", data={"_method": "DELETE"})

        assert response.status_code == 404

    def test_delete_twice(self, client):
        create_address(client, "Alice")

        assert client.delete("/addresses/1", follow_redirects=False).status_code == 303
        assert client.delete("/addresses/1", follow_redirects=False).status_code == 404

    def test_delete_through_method_override(self, client):
        create_address(client, "Alice")

        response = client.post("/addresses/1", data={"_method": "delete"}, follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/addresses"
        assert ROW_MARKER not in client.get("/addresses").text

    def test_post_to_address_without_override(self, client):
        create_address(client, "Alice")

        response = client.post("/addresses/1", data={})

        assert response.status_code == 405
        assert "Alice" in client.get("/addresses").text

    def test_ids_are_distinct(self, client):
        create_address(client, "Bob")
        create_address(client, "Carl")

        listing = client.get("/addresses").text
        assert 'action="/addresses/1"' in listing
        assert 'action="/addresses/2"' in listing

    def test_list_is_repeatable(self, client):
        create_address(client, "Bob")

        assert client.get("/addresses").text == client.get("/addresses").text

    @settings(max_examples=25, deadline=None, suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(name=form_text(NAME_MAX_LENGTH), street=form_text(300))
    def test_create_adds_exactly_one_row(self, client, name, street):
        """
        For any fields within the column limits, creating an address adds
        exactly one row to the listing.
        """
        before = client.get("/addresses").text.count(ROW_MARKER)

        response = create_address(client, name, street)

        assert response.headers["location"] == "/addresses"
        assert client.get("/addresses").text.count(ROW_MARKER) == before + 1


class TestRoutingExamples:
    """Simple responses, templates and route parameters."""

    def test_home(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert 'href="/route_examples"' in response.text

    def test_hello(self, client):
        response = client.get("/hello")

        assert response.text == "Hello!"
        assert response.headers["content-type"].startswith("text/plain")

    def test_template_parameter(self, client):
        assert "Got this from the handler" in client.get("/template_parameter").text

    def test_inline_template(self, client):
        assert "<h1>This is an inline template</h1>" in client.get("/inline_template").text

    def test_route_examples(self, client):
        response = client.get("/route_examples")

        assert response.status_code == 200
        assert 'href="/the/king/of/spain"' in response.text

    def test_search(self, client):
        response = client.get("/search", params={"q": "pizza"})

        assert "You asked for &#39;pizza&#39;" in response.text

    def test_search_without_query(self, client):
        assert "You asked for &#39;&#39;" in client.get("/search").text

    def test_named_parameter(self, client):
        assert "thing number &#39;42&#39;" in client.get("/things/42").text

    def test_named_parameter_as_argument(self, client):
        assert "object number &#39;7&#39;" in client.get("/objects/7").text

    def test_splats(self, client):
        assert "the king of spain" in client.get("/the/king/of/spain").text

    def test_splat_spans_segments(self, client):
        assert "the big/red of dog" in client.get("/the/big/red/of/dog").text

    def test_optional_format_defaults_to_html(self, client):
        assert "format: html" in client.get("/conditions").text

    def test_optional_format(self, client):
        assert "format: json" in client.get("/conditions.json").text

    def test_pattern_route_matches_lowercase(self, client):
        response = client.get("/words/hello")

        assert response.status_code == 200
        assert "word: hello" in response.text

    @pytest.mark.parametrize("path", ["/words/Hello", "/words/123", "/words/"])
    def test_pattern_route_rejects_other_words(self, client, path):
        assert client.get(path).status_code == 404

    def test_params_are_echoed(self, client):
        response = client.get("/things/42", params={"color": "red"})

        assert "color" in response.text
        assert "red" in response.text


class TestCsrf:
    """CSRF-protected username form."""

    def test_form_carries_token(self, client):
        assert len(csrf_token(client)) == 64

    def test_post_with_valid_token(self, client):
        token = csrf_token(client)

        response = client.post("/username", data={"username": "alice", "authenticity_token": token})

        assert response.status_code == 200
        assert response.text == "Your new username is 'alice'"

    def test_post_with_wrong_token(self, client):
        csrf_token(client)

        response = client.post("/username", data={"username": "alice", "authenticity_token": "0" * 64})

        assert response.status_code == 403

    def test_post_without_token(self, client):
        response = client.post("/username", data={"username": "alice"})

        assert response.status_code == 403

    def test_token_is_stable_within_session(self, client):
        assert csrf_token(client) == csrf_token(client)


class TestPhotoUpload:

    def test_upload_form(self, client):
        response = client.get("/photos")

        assert 'enctype="multipart/form-data"' in response.text

    def test_upload_saves_file(self, client, app_settings):
        response = client.post("/photos", files={"photo": ("cat.jpg", b"\xff\xd8jpeg", "image/jpeg")})

        assert response.status_code == 200
        assert response.text == "OK, photo saved"
        assert (app_settings.upload_dir / "cat.jpg").read_bytes() == b"\xff\xd8jpeg"

    def test_upload_keeps_only_base_name(self, client, app_settings):
        client.post("/photos", files={"photo": ("../../evil.jpg", b"data", "image/jpeg")})

        assert (app_settings.upload_dir / "evil.jpg").exists()

    def test_missing_file_redirects_to_form(self, client):
        response = client.post("/photos", data={"note": "no file"}, follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/photos"


class TestContentNegotiation:

    def test_json_when_asked(self, client):
        response = client.get("/provides", headers={"Accept": "application/json"})

        assert response.json() == {"result": "You asked for JSON"}

    def test_default_handler(self, client):
        response = client.get("/provides")

        assert response.text == "This is the default handler"


class TestHealthAndErrors:

    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["storage_backend"] == "sql"
        assert data["storage_connected"] is True
        assert "timestamp" in data

    def test_health_check_degraded(self, client):
        client.app.state.repository.health_check = AsyncMock(return_value=False)

        data = client.get("/health").json()

        assert data["status"] == "degraded"
        assert data["storage_connected"] is False

    def test_storage_outage_maps_to_503(self, client):
        client.app.state.repository.list_all = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("database is locked"))
        )

        response = client.get("/addresses")

        assert response.status_code == 503
        assert response.json()["error"] == "Service Unavailable"

    def test_unexpected_error_maps_to_500(self, client):
        client.app.state.repository.list_all = AsyncMock(side_effect=RuntimeError("boom"))

        response = client.get("/addresses")

        assert response.status_code == 500
        assert response.json()["message"] == "An unexpected error occurred"

    def test_corrupted_record_maps_to_500(self, client):
        client.app.state.repository.list_all = AsyncMock(
            side_effect=AddressStorageError("Corrupted data in storage")
        )

        response = client.get("/addresses")

        assert response.status_code == 500
        assert response.json()["message"] == "Database error occurred"

    def test_correlation_id_is_echoed(self, client):
        response = client.get("/hello", headers={"X-Correlation-ID": "req-42"})

        assert response.headers["X-Correlation-ID"] == "req-42"

    def test_correlation_id_is_generated(self, client):
        assert client.get("/hello").headers["X-Correlation-ID"]


def test_redis_backend_is_selectable(app_settings):
    app_settings.storage_backend = "redis"

    app = create_app(app_settings)

    assert type(app.state.repository).__name__ == "RedisAddressRepository"
