"""
Authentication against the salt-api ``/login`` endpoint

The credentials are read from the options handed to
:py:class:`~saltapi.client.SaltAPIClient`:

.. code-block:: yaml

    endpoint: https://salt.example.com:8000
    user: saltdev
    pass:
      function: saltapi.auth.password_reader
      args:
        - /etc/salt/api.pass

A token is requested for every call, they are never cached.
"""

import importlib
import logging
import urllib.parse

import requests

from saltapi.exceptions import (
    EauthAuthenticationError,
    SaltClientError,
    SaltConfigurationError,
)

log = logging.getLogger(__name__)

LOGIN_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded",
    "Accept": "application/json",
}


def endpoint(opts):
    """
    Return the configured salt-api URL
    """
    url = opts.get("endpoint")
    if not url:
        raise SaltConfigurationError("Endpoint must be configured.")
    return url


def login_url(opts):
    """
    Return the URL used to obtain an auth token
    """
    return endpoint(opts).rstrip("/") + "/login"


def password_reader(password_file):
    """
    Read a password from ``password_file``, dropping surrounding whitespace.
    Meant to be used as the ``pass`` callback.
    """
    with open(password_file, encoding="utf-8") as fp_:
        return fp_.read().strip()


def _load_callback(name):
    """
    Import ``module.function`` and return the function
    """
    modname, _, funcname = name.rpartition(".")
    if not modname:
        raise SaltConfigurationError(
            f"saltapi pass function '{name}' must be given as 'module.function'"
        )
    try:
        module = importlib.import_module(modname)
        return getattr(module, funcname)
    except (ImportError, AttributeError) as exc:
        raise SaltConfigurationError(
            f"Unable to load saltapi pass function '{name}': {exc}"
        )


def _call_password_function(name, func, args=(), kwargs=None):
    log.debug("Calling %s to obtain the saltapi password", name)
    try:
        password = func(*args, **(kwargs or {}))
    except Exception as exc:  # pylint: disable=broad-except
        raise SaltConfigurationError(f"saltapi pass function '{name}' failed: {exc}")
    if password is None or password == "":
        raise SaltConfigurationError("saltapi pass missing")
    return password


def _resolve_password(value):
    if callable(value):
        name = getattr(value, "__name__", repr(value))
        return _call_password_function(name, value)
    if isinstance(value, dict):
        if "function" not in value:
            raise SaltConfigurationError(
                "saltapi pass mapping requires a 'function' key"
            )
        name = value["function"]
        return _call_password_function(
            name,
            _load_callback(name),
            value.get("args", []),
            value.get("kwargs", {}),
        )
    return value


def credentials(opts):
    """
    Return the ``(user, password)`` pair to log in with
    """
    user = opts.get("user")
    if not user:
        raise SaltConfigurationError("saltapi user missing")
    password = opts.get("pass")
    if password is None or password == "":
        raise SaltConfigurationError("saltapi pass missing")
    return user, _resolve_password(password)


def creds_to_querystring(opts):
    """
    Build the form-encoded login payload
    """
    user, password = credentials(opts)
    return urllib.parse.urlencode(
        [
            ("username", user),
            ("password", password),
            ("eauth", opts.get("eauth") or "pam"),
        ]
    )


def _token_from_body(response):
    try:
        return response.json()["return"][0]["token"]
    except (ValueError, KeyError, IndexError, TypeError):
        return None


def token(opts, session=None):
    """
    Log in to the salt-api server and return a fresh auth token
    """
    if session is None:
        with requests.Session() as session:
            return _login(opts, session)
    return _login(opts, session)


def _login(opts, session):
    url = login_url(opts)
    payload = creds_to_querystring(opts)
    log.debug("Requesting a salt-api token from %s", url)
    try:
        response = session.post(
            url,
            data=payload,
            headers=LOGIN_HEADERS,
            timeout=opts.get("timeout"),
        )
    except requests.exceptions.RequestException as exc:
        raise SaltClientError(f"Unable to reach {url}: {exc}")

    if response.status_code != 200:
        log.debug("salt-api login failed with HTTP %s", response.status_code)
        raise EauthAuthenticationError(
            "Authentication against {} failed: HTTP {}".format(
                url, response.status_code
            )
        )

    auth_token = response.headers.get("X-Auth-Token") or _token_from_body(response)
    if not auth_token:
        raise EauthAuthenticationError(f"No auth token returned by {url}")
    return auth_token
