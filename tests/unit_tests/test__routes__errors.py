from bson import ObjectId
from fastapi import status
from fastapi.testclient import TestClient

from files_store.adapters.storage import BaseStore
from files_store.main import create_app

BOUNDARY = "error-test-boundary"


def raw_multipart(*parts) -> bytes:
    body = b""
    for name, content in parts:
        body += f"--{BOUNDARY}\r\nContent-Disposition: form-data; name=\"{name}\"\r\n\r\n".encode()
        body += content + b"\r\n"
    return body + f"--{BOUNDARY}--\r\n".encode()


def post_raw(client: TestClient, body: bytes, content_type: str = f"multipart/form-data; boundary={BOUNDARY}"):
    return client.post("/", content=body, headers={"content-type": content_type})


def test__upload_file__unknown_type(client: TestClient, bucket, collection):
    response = client.post("/", data={"name": "empty", "owner": "alice"}, files={"bytes": ("empty", b"")})

    assert response.status_code == status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    assert response.json() == {"detail": "unknown file type"}
    assert bucket.files == {}
    assert collection.documents == []


def test__upload_file__invalid_utf8_field(client: TestClient, bucket):
    body = raw_multipart(("name", b"\xff\xfe"), ("owner", b"alice"), ("bytes", b"hello"))

    response = post_raw(client, body)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "name" in response.json()["detail"]
    assert bucket.files == {}


def test__upload_file__not_multipart(client: TestClient):
    response = post_raw(client, b'{"name": "x"}', content_type="application/json")

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test__upload_file__backend_failure(client: TestClient, bucket):
    bucket.fail_uploads = True

    response = client.post("/", data={"name": "a.txt", "owner": "alice"}, files={"bytes": ("a.txt", b"hello")})

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert "blob upload failed" in response.json()["detail"]


def test__get_file__not_found(client: TestClient):
    response = client.get(f"/{ObjectId()}")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"].startswith("file not found")


def test__get_file__invalid_key(client: TestClient, bucket):
    response = client.get("/not-a-valid-key")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert bucket.download_calls == 0


def test__get_file_info__invalid_key(client: TestClient, collection):
    response = client.get("/not-a-valid-key/info")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert collection.find_calls == 0


def test__get_file_info__backend_failure(client: TestClient, collection):
    collection.fail_finds = True

    response = client.get(f"/{ObjectId()}/info")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert "metadata lookup failed" in response.json()["detail"]


class ExplodingStore(BaseStore):
    def info(self, key):
        raise RuntimeError("driver crashed")

    def ping(self):
        return False


def test__unexpected_error_is_a_server_error(settings):
    client = TestClient(create_app(settings=settings, store=ExplodingStore()))

    response = client.get(f"/{ObjectId()}/info")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"detail": "driver crashed"}


def test__health__degraded_when_store_unreachable(settings):
    client = TestClient(create_app(settings=settings, store=ExplodingStore()))

    response = client.get("/health")

    assert response.json()["status"] == "degraded"
    assert response.json()["ready"] is False


def test__get_file_info__malformed_record_is_a_server_error(client: TestClient, collection):
    key = str(ObjectId())
    collection.documents.append({"key": key, "name": "x"})

    response = client.get(f"/{key}/info")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"detail": f"malformed metadata record for {key}"}
