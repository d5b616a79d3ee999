"""
Layers pair a mount prefix with a handler.  Handlers come in two flavors,
decided once when the layer is registered:

    def logger(request, response, next):
        print(request.method, request.url)
        next()

    def report(error, request, response, next):
        print("Failed:", error)
        next(error)

Normal handlers only see requests without an error, error handlers only see
requests that are carrying one.  Plain functions are sorted by how many
positional parameters they declare; use `handler` or `error_handler` to
choose explicitly.
"""
import collections
import inspect
import logging
from .common import ConfigurationError
logger = logging.getLogger(__name__)

ERROR_ARITY = 4
POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD
)


Layer = collections.namedtuple("Layer", ["prefix", "handler"])


def arity(func):
    """ Number of declared positional parameters, not counting self """
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        # Some builtins don't expose a signature
        return 0
    return sum(1 for p in signature.parameters.values() if p.kind in POSITIONAL)


def normalize(prefix):
    """ '/foo/' and '/foo' are the same mount point, '/' matches everything """
    if not isinstance(prefix, str):
        raise ConfigurationError("Prefix must be a string, not {!r}".format(prefix))
    if prefix.endswith("/"):
        prefix = prefix[:-1]
    return prefix


class FunctionHandler(object):
    accepts_errors = False

    def __init__(self, func):
        if not callable(func):
            raise ConfigurationError("Handler {!r} is not callable".format(func))
        self.func = func

    def __repr__(self):
        return "{}({!r})".format(self.__class__.__name__, self.func)


class Handler(FunctionHandler):
    """ Wraps func(request, response, next) """

    def handle(self, request, response, next):
        self.func(request, response, next)


class ErrorHandler(FunctionHandler):
    """
    Wraps func(error, request, response, next).  Only offered requests that
    carry an error, so there is no `handle`.
    """
    accepts_errors = True

    def handle_error(self, error, request, response, next):
        self.func(error, request, response, next)


class StackHandler(object):
    """
    Mounts a nested stack as a single handler.  When the nested stack runs
    out of layers it hands the request back through `next`.
    """
    accepts_errors = False

    def __init__(self, stack):
        self.stack = stack

    def handle(self, request, response, next):
        self.stack.handle(request, response, next)

    def __repr__(self):
        return "StackHandler({!r})".format(self.stack)


VARIANTS = (FunctionHandler, StackHandler)


def handler(func):
    ''' Decorator that marks func as a normal handler regardless of arity '''
    func.__handler__ = Handler(func)
    return func


def error_handler(func):
    ''' Decorator that marks func as an error handler regardless of arity '''
    func.__handler__ = ErrorHandler(func)
    return func


def wrap(obj):
    """ Pick the handler variant for a registered object """
    if isinstance(obj, VARIANTS):
        return obj
    marked = getattr(obj, "__handler__", None)
    if isinstance(marked, VARIANTS):
        return marked
    if callable(getattr(obj, "handle", None)):
        return StackHandler(obj)
    if not callable(obj):
        raise ConfigurationError("Handler {!r} is not callable".format(obj))
    if arity(obj) == ERROR_ARITY:
        return ErrorHandler(obj)
    return Handler(obj)
