import logging
import urllib.parse
from . import common
from . import final
from . import layer
from . import wsgi
logger = logging.getLogger(__name__)
missing = object()


def protohost(url):
    """
    Scheme and host of a fully-qualified url, or '' for a relative one.

    >>> protohost("http://example.com/admin?next=/")
    'http://example.com'
    >>> protohost("/admin")
    ''
    """
    if not url or url.startswith("/"):
        return ""
    path = url.split("?", 1)[0]
    index = path.find("://")
    if index == -1:
        return ""
    end = path.find("/", index + 3)
    return path if end == -1 else path[:end]


def url_path(url):
    """
    Path portion of a request url.  Only fully-qualified urls are parsed for
    a host, so the relative url '//x/admin' has the path '//x/admin'.
    """
    if protohost(url):
        return urllib.parse.urlsplit(url).path or "/"
    for separator in "?#":
        url = url.split(separator, 1)[0]
    return url or "/"


def matches(prefix, path):
    """
    True when path is under the mount point prefix.  The prefix has to end
    on a segment boundary, so '/admin' matches '/admin', '/admin/x' and
    '/admin.json' but not '/administrator'.
    """
    if path[:len(prefix)].lower() != prefix.lower():
        return False
    following = path[len(prefix):len(prefix) + 1]
    return following in ("", "/", ".")


class Dispatch(object):
    def __init__(self, stack, request, response, out=None):
        """
        Walks a single request through the layers of a stack.

        The instance is the `next` continuation handed to every handler.
        It owns all of the per-request state, so the stack itself is never
        mutated while requests are in flight.
        """
        self.stack = stack
        self.layers = stack.layers
        self.request = request
        self.response = response
        self.out = out

        self.index = 0
        # Portion of the url trimmed for the current layer, and where it was
        self.removed = ""
        self.protohost = ""
        self.slash_added = False

    def __call__(self, error=None):
        """
        Continue processing the request, optionally carrying an error.

        May be invoked by a handler immediately or at any later time.
        Layers that don't match, or that can't take the current error state,
        are skipped without growing the call stack.
        """
        request = self.request
        while True:
            self.restore()

            if self.index >= len(self.layers) or self.response.sent:
                self.finish(error)
                return
            current = self.layers[self.index]
            self.index += 1

            try:
                path = url_path(request.url)
            except ValueError as exception:
                logger.debug("Unparseable url {!r}".format(request.url))
                error = common.HTTPError(400, str(exception))
                continue

            if not matches(current.prefix, path):
                continue

            self.commit(current.prefix)

            handler = current.handler
            has_error = error is not None
            if has_error != handler.accepts_errors:
                continue

            logger.debug("Invoking {!r} for {!r}".format(handler, request.url))
            try:
                if has_error:
                    handler.handle_error(error, request, self.response, self)
                else:
                    handler.handle(request, self.response, self)
            except Exception as exception:
                logger.debug(
                    "Exception raised by {!r}".format(handler),
                    exc_info=exception)
                error = exception
                continue
            return

    def restore(self):
        """ Undo the url rewrite made for the last layer that ran """
        request = self.request
        if self.slash_added:
            request.url = request.url[1:]
            self.slash_added = False
        if self.removed:
            start = len(self.protohost)
            request.url = (
                request.url[:start] + self.removed + request.url[start:])
            self.removed = ""
        if getattr(request, "original_url", None) is None:
            request.original_url = request.url

    def commit(self, prefix):
        """ Trim prefix from the url so the handler sees a mount-relative url """
        request = self.request
        self.protohost = protohost(request.url)
        start = len(self.protohost)
        end = start + len(prefix)
        self.removed = request.url[start:end]
        request.url = request.url[:start] + request.url[end:]

        # Handlers can always count on a leading slash
        if not self.protohost and not request.url.startswith("/"):
            request.url = "/" + request.url
            self.slash_added = True

    def finish(self, error):
        """ Hand back to the parent, or write a terminal response """
        if self.out is not None:
            self.out(error)
        elif error is not None:
            self.stack.__error__(error, self.request, self.response)
        else:
            self.stack.__unhandled__(self.request, self.response)


class Stack(object):
    # Terminal responses when a request falls off the end of the stack.
    # Invoked as:
    #   __unhandled__(stack, request, response)
    #   __error__(stack, error, request, response)
    __unhandled__ = final.unhandled
    __error__ = final.error

    def __init__(self, **config):
        self.config = common.load_defaults(config)
        # Set when this stack is mounted inside another one
        self.route = None
        self._layers = []

    @property
    def layers(self):
        return tuple(self._layers)

    @property
    def quiet(self):
        return common.is_quiet(self.config)

    def use(self, prefix="/", handler=missing):
        """
        Register handler for requests under prefix.  Returns the stack so
        calls can be chained:

            stack = Stack()
            stack.use(logger).use("/admin", admin)

        Without a handler, returns a decorator.  Note the parentheses; a bare
        `@stack.use` registers the function but rebinds its name to the stack:

            @stack.use("/admin")
            def admin(request, response, next):
                ...

            @stack.use()
            def logger(request, response, next):
                ...
        """
        if not isinstance(prefix, str):
            prefix, handler = "/", prefix
        if handler is missing:
            def decorator(func):
                self.use(prefix, func)
                return func
            return decorator

        wrapped = layer.wrap(handler)
        if isinstance(wrapped, layer.StackHandler):
            wrapped.stack.route = prefix

        prefix = layer.normalize(prefix)
        logger.info("use {!r} at {!r}".format(wrapped, prefix or "/"))
        self._layers.append(layer.Layer(prefix, wrapped))
        return self

    def handle(self, request, response, out=None):
        """
        Run request through the stack.

        out is called with the pending error (or None) once this stack runs
        out of layers; without it the stack writes its own terminal response.
        """
        Dispatch(self, request, response, out)()

    def wsgi_application(self, environ, start_response):
        request = wsgi.Request(environ)
        response = wsgi.Response(start_response)
        self.handle(request, response)

        # WSGI can't wait for a handler that deferred its continuation
        if not response.sent:
            logger.warning(
                "{} {} was not answered during dispatch".format(
                    request.method, request.original_url))
            response.exception(wsgi.INTERNAL_ERROR)
        return response.send()

    def listen(self, host=None, port=None):
        # using http because wsgiref doesn't support TLS
        from wsgiref.simple_server import make_server

        host = host or self.config["host"]
        port = port or self.config["port"]
        httpd = make_server(host, port, self.wsgi_application)
        logger.info("Listening on {}:{}".format(host, port))
        httpd.serve_forever()
        return httpd
