"""Tests for the API client."""

import httpx
import pytest

from bookshelf.client import (
    ApiError,
    BookshelfClient,
    ParseError,
    Session,
    SessionExpiredError,
)


@pytest.fixture
def api(client):
    """Client talking to the app through the test client."""
    return BookshelfClient(client)


def mock_api(handler):
    http = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://catalog.test")
    return BookshelfClient(http)


class TestSessionFlow:
    def test_signup_populates_session(self, api):
        session = api.signup(Session(), "reader@example.com", "hunter22")

        assert session.is_authenticated
        assert session.email == "reader@example.com"
        assert session.user_id
        assert session.headers() == {"Authorization": f"Bearer {session.token}"}

    def test_login_and_logout(self, api):
        api.signup(Session(), "reader@example.com", "hunter22")

        session = api.login(Session(), "reader@example.com", "hunter22")
        assert session.is_authenticated

        api.logout(session)
        assert not session.is_authenticated
        assert session.headers() == {}

    def test_bad_login_is_an_api_error(self, api):
        with pytest.raises(ApiError) as exc_info:
            api.login(Session(), "nobody@example.com", "hunter22")
        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid credentials"

    def test_sessions_are_independent(self, api):
        first = api.signup(Session(), "one@example.com", "pass-one")
        second = api.signup(Session(), "two@example.com", "pass-two")
        assert first.token != second.token
        assert first.user_id != second.user_id


class TestBooks:
    @pytest.fixture
    def session(self, api):
        return api.signup(Session(), "reader@example.com", "hunter22")

    def test_crud(self, api, session):
        created = api.create_book(
            session,
            {
                "title": "Dune",
                "author": "Frank Herbert",
                "category": "Fiction",
                "price": 350,
                "rating": 4.9,
                "publishedDate": "1965-08-01",
            },
        )
        assert api.get_book(session, created["id"])["title"] == "Dune"

        updated = api.update_book(session, created["id"], {"price": 375})
        assert updated["price"] == 375

        assert api.delete_book(session, created["id"]) is None
        with pytest.raises(ApiError) as exc_info:
            api.get_book(session, created["id"])
        assert exc_info.value.status_code == 404

    def test_list_uses_client_page_size(self, api, session):
        result = api.list_books(session, category="Fiction")
        assert result["data"] == []
        assert result["pagination"]["limit"] == 6

    def test_unauthenticated_session_expires(self, api):
        session = Session(token="stale-token")
        with pytest.raises(SessionExpiredError):
            api.list_books(session)
        assert not session.is_authenticated

    def test_validation_error_message_is_surfaced(self, api, session):
        with pytest.raises(ApiError) as exc_info:
            api.create_book(session, {"title": "Incomplete"})
        assert exc_info.value.status_code == 400
        assert exc_info.value.message


class TestParseErrors:
    def test_non_json_success_body(self):
        api = mock_api(lambda request: httpx.Response(200, text="<html>ok</html>"))
        with pytest.raises(ParseError):
            api.list_books(Session(token="t"))

    def test_non_json_error_body_is_not_an_api_error(self):
        api = mock_api(lambda request: httpx.Response(502, text="Bad Gateway"))
        with pytest.raises(ParseError):
            api.get_book(Session(token="t"), "abc")

    def test_unexpected_list_shape(self):
        api = mock_api(lambda request: httpx.Response(200, json={"items": []}))
        with pytest.raises(ParseError):
            api.list_books(Session(token="t"))

    def test_auth_response_without_token(self):
        api = mock_api(lambda request: httpx.Response(200, json={"id": "1"}))
        session = Session()
        with pytest.raises(ParseError):
            api.login(session, "reader@example.com", "hunter22")
        assert not session.is_authenticated

    def test_request_carries_session_token(self):
        seen = {}

        def handler(request):
            seen["authorization"] = request.headers.get("authorization")
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"data": [], "pagination": {"pages": 0}})

        api = mock_api(handler)
        api.list_books(Session(token="abc"), title="dune", rating=4, page=2)

        assert seen["authorization"] == "Bearer abc"
        assert seen["params"] == {"title": "dune", "rating": "4", "page": "2", "limit": "6"}
