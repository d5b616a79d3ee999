import copy
import os
import ujson


DEFAULT_CONFIG = {
    "env": "development",
    "quiet": False,
    "host": "localhost",
    "port": 8080
}
ENV_VARIABLE = "PYSTACK_ENV"


class ConfigurationError(ValueError):
    """Raised when a layer can't be registered as given."""


class HTTPError(Exception):
    """
    An error with an HTTP status attached.

    Pass one to `next` to choose the status of the terminal response:

        def require_user(request, response, next):
            if not request.headers.get("Authorization"):
                next(HTTPError(401))
            else:
                next()
    """
    def __init__(self, status, msg=None):
        self.status = status
        self.msg = msg
        super().__init__(status, msg)

    def __str__(self):
        if self.msg:
            return "{} {}".format(self.status, self.msg)
        return str(self.status)


def load_defaults(config):
    """ Update the given config (dict) with any missing values """
    default = copy.deepcopy(DEFAULT_CONFIG)
    default["env"] = os.environ.get(ENV_VARIABLE, default["env"])
    for key, default_value in default.items():
        config[key] = config.get(key, default_value)
    return config


def load_config(string):
    """Load a JSON config document and fill in defaults"""
    config = ujson.loads(string)
    if not isinstance(config, dict):
        raise ConfigurationError("config must be a JSON object")
    return load_defaults(config)


def is_quiet(config):
    """
    Diagnostics for unhandled errors are suppressed when the config asks
    for it, or whenever we're running under the test env.
    """
    return bool(config.get("quiet")) or config.get("env") == "test"
