from fastapi.responses import PlainTextResponse
from fastapi.testclient import TestClient

from swagdoc.document import endpoint, option
from swagdoc.document.api import new
from swagdoc.document.server import make_app, route_table


def hello(request):
    return PlainTextResponse("hello")


async def echo_method(request):
    return PlainTextResponse(request.method.lower())


def make_api(*options):
    api = new(*options)
    api.add_endpoint(
        endpoint.new("get", "/hello", endpoint.handler(hello)),
        endpoint.new("post", "/hello"),
        endpoint.new("put", "/hello", endpoint.handler("not callable")),
        endpoint.new("delete", "/hello", endpoint.handler(echo_method)),
    )
    return api


class TestDocumentApp:
    def test_serves_document_with_request_host(self):
        client = TestClient(make_app(make_api()))
        resp = client.get("/swagger.json", headers={"Host": "docs.example.com", "X-Forwarded-Proto": "https"})
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/json"
        doc = resp.json()
        assert doc["host"] == "docs.example.com"
        assert doc["schemes"] == ["https"]
        assert "/hello" in doc["paths"]

    def test_scheme_from_url(self):
        client = TestClient(make_app(make_api()), base_url="https://testserver")
        assert client.get("/swagger.json").json()["schemes"] == ["https"]

    def test_default_scheme(self):
        doc = TestClient(make_app(make_api())).get("/swagger.json").json()
        assert doc["schemes"] == ["http"]
        assert doc["host"] == "testserver"

    def test_original_untouched(self):
        api = make_api()
        TestClient(make_app(api)).get("/swagger.json", headers={"Host": "docs.example.com"})
        assert api.host == ""
        assert api.schemes == ["http"]

    def test_custom_url(self):
        client = TestClient(make_app(make_api(), "/api/docs.json"))
        assert client.get("/api/docs.json").status_code == 200
        assert client.get("/swagger.json").status_code == 404


class TestDispatch:
    def test_calls_handler(self):
        resp = TestClient(make_app(make_api())).get("/hello")
        assert resp.status_code == 200
        assert resp.text == "hello"

    def test_async_handler(self):
        resp = TestClient(make_app(make_api())).delete("/hello")
        assert resp.status_code == 200
        assert resp.text == "delete"

    def test_unknown_path(self):
        assert TestClient(make_app(make_api())).get("/missing").status_code == 404

    def test_unknown_method(self):
        assert TestClient(make_app(make_api())).patch("/hello").status_code == 404

    def test_missing_handler(self):
        assert TestClient(make_app(make_api())).post("/hello").status_code == 404

    def test_handler_not_callable(self):
        resp = TestClient(make_app(make_api())).put("/hello")
        assert resp.status_code == 500
        assert resp.text == "Handler is not a callable request handler"


class TestBasePath:
    def test_dispatches_under_base_path(self):
        client = TestClient(make_app(make_api(option.base_path("/v2"))))
        resp = client.get("/v2/hello")
        assert resp.status_code == 200
        assert resp.text == "hello"

    def test_unprefixed_path_not_found(self):
        client = TestClient(make_app(make_api(option.base_path("/v2"))))
        assert client.get("/hello").status_code == 404

    def test_trailing_slash_base_path(self):
        client = TestClient(make_app(make_api(option.base_path("/v2/"))))
        assert client.get("/v2/hello").status_code == 200

    def test_route_table(self):
        api = make_api(option.base_path("/v2"))
        assert list(route_table(api)) == ["/v2/hello"]
