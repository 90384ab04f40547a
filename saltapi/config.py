"""
All saltapi configuration loading and defaults should be in this module
"""

import logging
import os
from copy import deepcopy

import yaml

import saltapi.exceptions

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join("~", ".saltapirc")
DEFAULT_TIMEOUT = 180

# The keys of ``http_opts`` which map onto ``requests.Session`` attributes
HTTP_OPTS = ("verify", "cert", "proxies", "headers")

VALID_OPTS = {
    # The URL of the salt-api server, ie, https://salt.example.com:8000
    "endpoint": (str, type(None)),
    # The eauth user to log in as
    "user": (str, type(None)),
    # The eauth password. Either the password itself, a python callable, or a
    # mapping naming a function to call, ie:
    #   pass:
    #     function: saltapi.auth.password_reader
    #     args:
    #       - /etc/salt/api.pass
    "pass": (str, dict, type(None)),
    # The external authentication backend to log in with
    "eauth": str,
    # Options handed to the HTTP session, see HTTP_OPTS
    "http_opts": dict,
    # Seconds to wait for a synchronous request to complete
    "timeout": (int, float),
    # Console logging level
    "log_level": (str, type(None)),
    # Console logging format
    "log_fmt_console": (str, type(None)),
    # Console logging date format
    "log_datefmt": (str, type(None)),
    # Path of the loaded configuration file
    "conf_file": (str, type(None)),
}

DEFAULT_API_OPTS = {
    "endpoint": None,
    "user": None,
    "pass": None,
    "eauth": "pam",
    "http_opts": {},
    "timeout": DEFAULT_TIMEOUT,
    "log_level": "warning",
    "log_fmt_console": None,
    "log_datefmt": None,
    "conf_file": None,
}


def _validate_opts(opts):
    """
    Check that all of the types of values passed into the config are
    of the right types
    """

    def format_multi_opt(valid_type):
        try:
            return " or ".join(item.__name__ for item in valid_type)
        except TypeError:
            # Bare type name won't be iterable, return the name of the type
            return valid_type.__name__

    errors = []
    for key, val in opts.items():
        if key not in VALID_OPTS:
            continue
        valid_type = VALID_OPTS[key]
        if callable(val) and key == "pass":
            continue
        # bool is an int, but never a sensible timeout
        if isinstance(val, bool) and key == "timeout":
            errors.append(
                "Key '{}' with value {!r} has an invalid type of bool, a {} is "
                "required for this option".format(key, val, format_multi_opt(valid_type))
            )
            continue
        if not isinstance(val, valid_type):
            errors.append(
                "Key '{}' with value {!r} has an invalid type of {}, a {} is "
                "required for this option".format(
                    key, val, type(val).__name__, format_multi_opt(valid_type)
                )
            )

    http_opts = opts.get("http_opts")
    if isinstance(http_opts, dict):
        for key in http_opts:
            if key not in HTTP_OPTS:
                errors.append(
                    "Unknown http_opts key '{}', valid keys are: {}".format(
                        key, ", ".join(HTTP_OPTS)
                    )
                )

    for error in errors:
        log.warning(error)
    if errors:
        raise saltapi.exceptions.SaltConfigurationError(errors[0])
    return True


def _read_conf_file(path):
    """
    Read in a config file from a given path and process it into a dictionary
    """
    log.debug("Reading configuration from %s", path)
    with open(path, encoding="utf-8") as conf_file:
        try:
            conf_opts = yaml.safe_load(conf_file) or {}
        except yaml.YAMLError as err:
            message = f"Error parsing configuration file: {path} - {err}"
            log.error(message)
            raise saltapi.exceptions.SaltConfigurationError(message)

    # only interpret documents as a valid conf, not things like strings,
    # which might have been caused by invalid yaml syntax
    if not isinstance(conf_opts, dict):
        message = (
            "Error parsing configuration file: {} - conf "
            "should be a document, not {}.".format(path, type(conf_opts))
        )
        log.error(message)
        raise saltapi.exceptions.SaltConfigurationError(message)
    return conf_opts


def load_config(path, env_var, default_path=None):
    """
    Returns configuration dict from parsing either the file described by
    ``path`` or the environment variable described by ``env_var`` as YAML.
    """
    if path is None:
        # When the passed path is None, we just want the configuration
        # defaults, not actually loading the whole configuration.
        return {}

    if default_path is None:
        default_path = DEFAULT_CONFIG_PATH

    # Default to the environment variable path, if it exists
    env_path = os.environ.get(env_var, path)
    if not env_path or not os.path.isfile(os.path.expanduser(env_path)):
        env_path = path
    # If non-default path was passed explicitly, use that over the env variable
    if path != default_path:
        env_path = path

    path = os.path.expanduser(env_path)

    opts = {}
    if os.path.isfile(path) and os.access(path, os.R_OK):
        opts = _read_conf_file(path)
        opts["conf_file"] = path
    else:
        log.debug("Missing configuration file: %s", path)

    return opts


def apply_api_config(overrides=None, defaults=None):
    """
    Returns the saltapi options after merging ``overrides`` on top of
    ``defaults``
    """
    if defaults is None:
        defaults = DEFAULT_API_OPTS

    opts = deepcopy(defaults)
    if overrides:
        overrides = dict(overrides)
        # ``ibrowse_opts`` is the historical name of ``http_opts``
        if "ibrowse_opts" in overrides:
            legacy = overrides.pop("ibrowse_opts")
            overrides.setdefault("http_opts", legacy)
        opts.update(overrides)

    if opts.get("http_opts") is None:
        opts["http_opts"] = {}

    _validate_opts(opts)
    return opts


def api_config(path=DEFAULT_CONFIG_PATH, env_var="SALTAPI_CONFIG", defaults=None):
    """
    Read in the saltapi client config file

    Usage:

    .. code-block:: python

        import saltapi.config
        opts = saltapi.config.api_config('~/.saltapirc')
    """
    overrides = load_config(path, env_var, DEFAULT_CONFIG_PATH)
    return apply_api_config(overrides, defaults)
