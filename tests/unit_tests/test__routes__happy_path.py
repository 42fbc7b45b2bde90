from fastapi import status
from fastapi.testclient import TestClient

from board_proxy.main import create_app
from board_proxy.upstream import UpstreamClient
from tests.consts import TEST_API_KEY, TEST_FILE_CONTENT, TEST_FILE_CONTENT_TYPE, TEST_FILE_NAME
from tests.fixtures.upstream_fixtures import json_responder


def test_create_item__happy_path(client: TestClient, upstream):
    upstream.responder = json_responder({"data": {"create_item": {"id": "111"}}})

    response = client.post("/create-item", json={"boardId": 123, "itemName": "Task A"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"data": {"create_item": {"id": "111"}}}

    assert len(upstream.requests) == 1
    assert upstream.last_request.url.path == "/v2"
    sent = upstream.last_json()
    assert "create_item(board_id: $board_id, item_name: $item_name)" in sent["query"]
    assert sent["variables"] == {"board_id": "123", "item_name": "Task A"}


def test_create_item_accepts_string_board_id(client: TestClient, upstream):
    response = client.post("/create-item", json={"boardId": "123", "itemName": "Task A"})

    assert response.status_code == status.HTTP_200_OK
    assert upstream.last_json()["variables"]["board_id"] == "123"


def test_create_item_with_quotes_in_name_is_sent_as_variable(client: TestClient, upstream):
    name = 'He said "ship it" {now}'

    client.post("/create-item", json={"boardId": 1, "itemName": name})

    sent = upstream.last_json()
    assert sent["variables"]["item_name"] == name
    assert name not in sent["query"]


def test_create_subitem__happy_path(client: TestClient, upstream):
    upstream.responder = json_responder({"data": {"create_subitem": {"id": "222"}}})

    response = client.post("/create-subitem", json={"parentItemId": 111, "itemName": "Step 1"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"data": {"create_subitem": {"id": "222"}}}
    sent = upstream.last_json()
    assert "create_subitem(parent_item_id: $parent_item_id, item_name: $item_name)" in sent["query"]
    assert sent["variables"] == {"parent_item_id": "111", "item_name": "Step 1"}


def test_upstream_graphql_errors_are_relayed_verbatim(client: TestClient, upstream):
    body = {"errors": [{"message": "Board not found"}], "account_id": 1}
    upstream.responder = json_responder(body)

    response = client.post("/create-item", json={"boardId": 1, "itemName": "a"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == body


def test_upstream_json_error_status_is_relayed_as_success(client: TestClient, upstream):
    body = {"error_message": "Not Authenticated", "status_code": 401}
    upstream.responder = json_responder(body, status_code=401)

    response = client.post("/create-subitem", json={"parentItemId": 1, "itemName": "a"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == body


def test_upload_file__happy_path(client: TestClient, upstream, upload_dir):
    upstream.responder = json_responder({"data": {"add_file_to_column": {"id": "333"}}})

    response = client.post(
        "/upload",
        params={"item_id": "111", "column_id": "files"},
        files={"file": (TEST_FILE_NAME, TEST_FILE_CONTENT, TEST_FILE_CONTENT_TYPE)},
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"data": {"add_file_to_column": {"id": "333"}}}

    request = upstream.last_request
    assert request.url.path == "/v2/file"
    assert request.headers["Authorization"] == TEST_API_KEY
    assert request.headers["Content-Type"].startswith("multipart/form-data; boundary=")
    assert int(request.headers["Content-Length"]) == len(request.content)
    assert f'filename="{TEST_FILE_NAME}"'.encode() in request.content
    assert TEST_FILE_CONTENT in request.content
    assert b'"item_id": "111"' in request.content
    assert b'"column_id": "files"' in request.content

    # staged copy is gone once the response is sent
    assert list(upload_dir.iterdir()) == []


def test_health_check(client: TestClient, upstream):
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.text == "OK"
    assert upstream.requests == []


def test_upstream_client_lives_for_the_app_lifespan(settings, upstream):
    app = create_app(settings, transport=upstream.transport())

    with TestClient(app):
        client = app.state.upstream
        assert isinstance(client, UpstreamClient)
        assert not client._client.is_closed

    assert app.state.upstream is None
    assert client._client.is_closed
