import functools
import pytest
from pystack import Stack, ConfigurationError
from pystack import layer


def test_arity_counts_positional():
    def three(request, response, next):
        pass

    def four(error, request, response, next):
        pass

    def extras(request, response, next=None, *args, flag=False, **kwargs):
        pass

    assert layer.arity(three) == 3
    assert layer.arity(four) == 4
    assert layer.arity(extras) == 3


def test_arity_ignores_bound_self():
    class Handlers:
        def report(self, error, request, response, next):
            pass

    assert layer.arity(Handlers().report) == 4


def test_arity_partial():
    ''' Parameters already bound by a partial aren't counted '''
    def configured(level, error, request, response, next):
        pass
    assert layer.arity(functools.partial(configured, "debug")) == 4


def test_arity_without_signature():
    ''' Builtins without a signature are treated as normal handlers '''
    assert layer.arity(print) == 0


def test_normalize():
    assert layer.normalize("/") == ""
    assert layer.normalize("") == ""
    assert layer.normalize("/foo/") == "/foo"
    assert layer.normalize("/foo") == "/foo"
    # Only a single trailing slash is removed
    assert layer.normalize("/foo//") == "/foo/"


def test_normalize_rejects_non_string():
    with pytest.raises(ConfigurationError):
        layer.normalize(None)


def test_wrap_normal_handler():
    def func(request, response, next):
        pass
    wrapped = layer.wrap(func)
    assert type(wrapped) is layer.Handler
    assert not wrapped.accepts_errors
    assert wrapped.func is func


def test_wrap_error_handler():
    def func(error, request, response, next):
        pass
    wrapped = layer.wrap(func)
    assert type(wrapped) is layer.ErrorHandler
    assert wrapped.accepts_errors


def test_wrap_callable_object():
    class Middleware:
        def __call__(self, request, response, next):
            pass
    assert type(layer.wrap(Middleware())) is layer.Handler


def test_wrap_stack():
    ''' Anything with a handle method is mounted as a nested stack '''
    nested = Stack()
    wrapped = layer.wrap(nested)
    assert isinstance(wrapped, layer.StackHandler)
    assert wrapped.stack is nested
    assert not wrapped.accepts_errors


def test_wrap_existing_variant():
    variant = layer.Handler(lambda request, response, next: None)
    assert layer.wrap(variant) is variant


@pytest.mark.parametrize("obj", [None, 3, "handler", object()])
def test_wrap_rejects_non_callable(obj):
    with pytest.raises(ConfigurationError):
        layer.wrap(obj)


@pytest.mark.parametrize("args", [("/foo", 42), ("/foo", None), (None,)])
def test_use_rejects_non_callable(args):
    ''' An explicit None is a bad handler, not a request for a decorator '''
    stack = Stack()
    with pytest.raises(ConfigurationError):
        stack.use(*args)
    assert not stack.layers


def test_handler_decorator_forces_normal():
    ''' A four-argument function can still be a normal handler '''
    @layer.handler
    def func(request, response, next, extra=None):
        pass
    assert type(layer.wrap(func)) is layer.Handler


def test_error_handler_decorator_forces_error():
    @layer.error_handler
    def func(*args):
        pass
    assert layer.wrap(func).accepts_errors


def test_error_handler_only_handles_errors():
    ''' Error handlers expose handle_error and nothing for the normal path '''
    received = []
    wrapped = layer.ErrorHandler(
        lambda error, request, response, next: received.append(error))
    assert not hasattr(wrapped, "handle")
    wrapped.handle_error("error", "request", "response", "next")
    assert received == ["error"]


def test_stack_handler_forwards():
    received = []

    class Nested:
        def handle(self, request, response, next):
            received.append((request, response, next))

    wrapped = layer.StackHandler(Nested())
    wrapped.handle("request", "response", "next")
    assert received == [("request", "response", "next")]


def test_layer_is_immutable():
    entry = layer.Layer("/foo", layer.wrap(lambda request, response, next: None))
    with pytest.raises(AttributeError):
        entry.prefix = "/bar"
