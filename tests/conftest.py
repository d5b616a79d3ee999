import io
import pytest
from pystack import Stack


class Request:
    ''' Minimal request: just the fields dispatch relies on '''
    def __init__(self, url, method="GET"):
        self.url = url
        self.original_url = None
        self.method = method


class Response:
    ''' Records what was written so tests can inspect it '''
    def __init__(self):
        self.status = 200
        self.headers = {}
        self.body = None
        self.sent = False

    def end(self, body=""):
        assert not self.sent, "response ended twice"
        self.body = body
        self.sent = True


@pytest.fixture
def stack():
    ''' A stack that won't log unhandled errors '''
    return Stack(env="test")


@pytest.fixture
def request_for():
    ''' Build a request for the given url and method '''
    return Request


@pytest.fixture
def response():
    return Response()


@pytest.fixture
def calls():
    ''' Shared log that handlers append (name, url) pairs to '''
    return []


@pytest.fixture
def recorder(calls):
    '''
    Build a normal handler that records the url it saw and continues.

    Usage:

    def test_foo(stack, recorder, calls):
        stack.use(recorder("first"))
        ...
        assert calls == [("first", "/")]
    '''
    def make(name):
        def func(request, response, next):
            calls.append((name, request.url))
            next()
        return func
    return make


@pytest.fixture
def start_response():
    ''' Function that stores status, headers on itself '''
    def func(status, headers):
        self.status = status
        self.headers = headers
    self = func
    return func


@pytest.fixture
def environment():
    '''
    Function that returns an environ for the given path, method and body

    Usage:

    def test_foo(environment):
        environ = environment("/admin", body="Hello")
        assert environ["CONTENT_LENGTH"] == "5"
    '''
    def make(path, method="GET", body="", query=""):
        data = bytes(body, "utf8")
        return {
            "PATH_INFO": path,
            "QUERY_STRING": query,
            "REQUEST_METHOD": method,
            "CONTENT_LENGTH": str(len(data)),
            "wsgi.input": io.BytesIO(data)
        }
    return make
