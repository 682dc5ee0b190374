import requests

from devenv_bootstrap.infra.http_probe import HttpProbe


class _Response:
    def __init__(self, status_code):
        self.status_code = status_code
        self.closed = False

    def close(self):
        self.closed = True


class _Session:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def test_returns_status_code_of_any_response():
    resp = _Response(404)
    session = _Session(resp)

    status = HttpProbe(session=session).get_status("http://localhost:4873/@acme%2Fui-kit", timeout=5)

    assert status == 404
    assert resp.closed
    assert session.calls == [
        ("http://localhost:4873/@acme%2Fui-kit", {"timeout": 5, "allow_redirects": False})
    ]


def test_connection_error_means_no_status():
    session = _Session(requests.ConnectionError("refused"))
    assert HttpProbe(session=session).get_status("http://localhost:4873", timeout=1) is None


def test_timeout_means_no_status():
    session = _Session(requests.Timeout("slow"))
    assert HttpProbe(session=session).get_status("http://localhost:4873", timeout=1) is None
