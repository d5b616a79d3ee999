"""
Responses written when a request falls off the end of a stack that has no
parent to hand it back to.

Stack invokes these through its `__unhandled__` and `__error__` class
attributes, so a subclass can swap either one out:

    class JSONStack(Stack):
        def __unhandled__(self, request, response):
            response.status = 404
            response.json({"error": "not found"})
"""
import html
import logging
import traceback
logger = logging.getLogger(__name__)

CONTENT_TYPE = "text/plain; charset=utf-8"
# Methods whose responses never carry a body
NO_BODY = ("HEAD",)


def describe(error):
    """ Traceback when there is one, otherwise the best string we can get """
    traceback_ = getattr(error, "__traceback__", None)
    if traceback_ is not None:
        return "".join(
            traceback.format_exception(type(error), error, traceback_))
    return str(error) or repr(error)


def error_status(error):
    status = getattr(error, "status", None)
    if isinstance(status, int) and not isinstance(status, bool):
        return status
    return None


def unhandled(stack, request, response):
    if response.sent:
        return
    response.status = 404
    response.headers["Content-Type"] = CONTENT_TYPE
    if request.method in NO_BODY:
        response.end()
        return
    url = getattr(request, "original_url", None) or request.url
    response.end("Cannot {} {}".format(request.method, html.escape(url)))


def error(stack, error, request, response):
    # Don't downgrade a status some handler already set
    if response.status < 400:
        response.status = 500
    status = error_status(error)
    if status:
        response.status = status

    msg = describe(error)
    if not stack.quiet:
        logger.error(msg)

    if response.sent:
        return
    response.headers["Content-Type"] = CONTENT_TYPE
    if request.method in NO_BODY:
        response.end()
        return
    response.end(msg)
