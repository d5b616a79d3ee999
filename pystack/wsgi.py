"""
Request and Response objects that let a Stack sit behind any WSGI server.

The dispatch core only needs `request.url`, `request.original_url`,
`request.method`, `response.status` and `response.sent`; everything else
here is convenience for handlers.
"""
import http.client
import io
import logging
import ujson
from .common import HTTPError
logger = logging.getLogger(__name__)

HTTP_CODES = {i[0]: "{} {}".format(*i) for i in http.client.responses.items()}
MEMFILE_MAX = 102400
REQUEST_TOO_LARGE = HTTPError(413, "Request too large")
INTERNAL_ERROR = HTTPError(500, "Internal Error")


def request_url(environ):
    """ Path and query string the request was made for """
    url = environ.get("PATH_INFO", "") or "/"
    query = environ.get("QUERY_STRING", "")
    if query:
        url += "?" + query
    return url


def content_length(environ):
    """ Returns the content length, or -1 if none is provided """
    try:
        return int(environ.get("CONTENT_LENGTH") or -1)
    except ValueError:
        return -1


def load_body(environ):
    """ Read at most MEMFILE_MAX bytes of body, raising 413 past that """
    clen = content_length(environ)
    if clen > MEMFILE_MAX:
        raise REQUEST_TOO_LARGE
    stream = environ.get("wsgi.input") or io.BytesIO()
    if clen < 0:
        # No length given: read one byte past the limit to detect overflow
        data = stream.read(MEMFILE_MAX + 1)
    else:
        data = stream.read(clen)
    if len(data) > MEMFILE_MAX:
        raise REQUEST_TOO_LARGE
    return data


class Request(object):
    """
    Thin wrapper over a WSGI environ.

    `url` is rewritten as the request moves through mounted layers;
    `original_url` is set once when dispatch starts and never changes.
    """
    def __init__(self, environ):
        self.environ = environ
        self.url = request_url(environ)
        self.original_url = None
        self.method = environ.get("REQUEST_METHOD", "GET").upper()
        self._body = None

    @property
    def headers(self):
        """ Request headers by their HTTP name, e.g. headers["Content-Type"] """
        headers = {}
        for key, value in self.environ.items():
            if key.startswith("HTTP_"):
                name = key[5:].replace("_", "-").title()
                headers[name] = value
        for key in ("CONTENT_TYPE", "CONTENT_LENGTH"):
            if self.environ.get(key):
                headers[key.replace("_", "-").title()] = self.environ[key]
        return headers

    @property
    def body(self):
        '''Body as bytes; only read from the environ once'''
        if self._body is None:
            self._body = load_body(self.environ)
        return self._body

    @property
    def text(self):
        return self.body.decode("UTF-8")

    @property
    def json(self):
        return ujson.loads(self.text)


class Response(object):
    """
    Status, headers and body for a single request.

    Handlers finish a request with `response.end(body)`.  Once ended, the
    response is `sent` and no later layer will touch it.  To hand the result
    back to the WSGI server, use `return response.send()`.

    Example:

        def wsgi_application(environ, start_response):
            response = Response(start_response)
            response.end("Hello, World!")
            return response.send()

    """
    def __init__(self, start_response):
        self.status = 200
        self.headers = {}
        self.charset = "UTF-8"
        self.sent = False
        self.start_response = start_response
        self._body = [b""]

    def end(self, body=""):
        '''Finish the response.  body may be str or bytes.'''
        if self.sent:
            logger.debug("Ignoring end() on a response that was already sent")
            return
        if isinstance(body, str):
            body = body.encode(self.charset)
        self.headers["Content-Length"] = len(body)
        # WSGI spec needs iterable of bytes
        self._body = [body]
        self.sent = True

    def json(self, data):
        self.headers["Content-Type"] = "application/json"
        self.end(ujson.dumps(data))

    def exception(self, exc):
        '''Set appropriate status and an empty body for an HTTPError'''
        self.status = exc.status
        self.end()

    @property
    def status_line(self):
        return HTTP_CODES.get(
            self.status, "{} {}".format(self.status, "Unknown"))

    @property
    def headers_list(self):
        return [(str(h), str(v)) for (h, v) in self.headers.items()]

    def send(self):
        ''' Start the response and return the raw body '''
        self.start_response(self.status_line, self.headers_list)
        return self._body
