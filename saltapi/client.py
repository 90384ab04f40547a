"""
The salt-api client

Requests are sent as low data to the salt-api (``rest_cherrypy``) server. In
the code below ``client`` indicates one of

    local  - like the salt CLI command
    runner - like the salt-run CLI command
    wheel  - used for salt-key commands among others

``target`` is a minion specification like ``*`` or ``web-*`` and
``function`` is something akin to ``test.ping`` or ``key.list_all``.

``params`` is a mapping with two optional keys:

    arg   - a list of positional parameters for the function
    kwarg - a mapping of keyword arguments to the function

.. code-block:: python

    import saltapi.client
    import saltapi.config

    opts = saltapi.config.api_config('~/.saltapirc')
    with saltapi.client.SaltAPIClient(opts) as client:
        client.ping()
        client.request('local', 'web-*', 'cmd.run', {'arg': ['uptime']})
"""

import concurrent.futures
import json
import logging

import requests

import saltapi.auth
import saltapi.config
from saltapi.exceptions import (
    SaltAPIResponseError,
    SaltClientError,
    SaltClientTimeout,
    SaltConfigurationError,
    SaltInvocationError,
)

log = logging.getLogger(__name__)

CLIENTS = ("local", "runner", "wheel")
MODES = ("sync", "async")


class ReturnData(dict):
    """
    A decoded JSON object. Keys are plain strings, the ones which are valid
    identifiers can also be read as attributes:

    >>> ret = decode_results('{"return": [{"web1": true}]}')
    >>> ret["return"][0].web1
    True

    Keys which shadow a ``dict`` method (``items``, ``keys``, ``get``,
    ``values``, ``update`` ...) resolve to the method, use item access for
    those:

    >>> ret = decode_results('{"items": 1}')
    >>> ret["items"]
    1
    >>> callable(ret.items)
    True
    """

    def __getattr__(self, attr):
        try:
            return self[attr]
        except KeyError:
            raise AttributeError(attr)

    def __dir__(self):
        return list(super().__dir__()) + [
            key for key in self if isinstance(key, str) and key.isidentifier()
        ]


def decode_results(text):
    """
    Decode a JSON document, objects become :py:class:`ReturnData`
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    return json.loads(text, object_hook=ReturnData)


def _to_str(value, kind):
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8")
    # bool is also an int
    if isinstance(value, (bool, int, float)):
        return str(value)
    raise SaltInvocationError(
        "Unable to use {!r} of type {} as {}".format(value, type(value).__name__, kind)
    )


def arg_to_str(value):
    """
    Convert a positional argument to a string
    """
    return _to_str(value, "a positional argument")


def kwarg_to_str(value):
    """
    Convert a keyword argument name or value to a string
    """
    return _to_str(value, "a keyword argument")


def parse_params(params):
    """
    Split ``params`` into the ``arg`` list and ``kwarg`` mapping, every
    element converted to a string
    """
    if params is None:
        params = {}
    if not hasattr(params, "get"):
        raise SaltInvocationError("params must be a mapping with arg and kwarg keys")
    arg = params.get("arg") or []
    kwarg = params.get("kwarg") or {}
    if isinstance(arg, (str, bytes)) or not hasattr(arg, "__iter__"):
        raise SaltInvocationError("arg must be a list of positional arguments")
    if not hasattr(kwarg, "items"):
        raise SaltInvocationError("kwarg must be a mapping of keyword arguments")
    return (
        [arg_to_str(item) for item in arg],
        {kwarg_to_str(key): kwarg_to_str(val) for key, val in kwarg.items()},
    )


def make_payload(client, target, function, arg, kwarg):
    """
    Encode the low data sent to the salt-api server
    """
    return json.dumps(
        {
            "client": client,
            "tgt": target,
            "fun": function,
            "arg": arg,
            "kwarg": kwarg,
        },
        separators=(",", ":"),
    )


def _build_session(http_opts):
    """
    Create a session to be used when connecting to salt-api
    """
    session = requests.Session()
    for key, value in http_opts.items():
        if key == "headers":
            session.headers.update(value)
        elif key in saltapi.config.HTTP_OPTS:
            setattr(session, key, value)
        else:
            raise SaltConfigurationError(f"Unknown http_opts key '{key}'")
    return session


class SaltAPIClient:
    """
    Send requests to a salt-api server.

    ``opts`` is the dictionary returned by
    :py:func:`saltapi.config.api_config`; a partial dictionary is completed
    with the defaults.
    """

    def __init__(self, opts, session=None):
        self.opts = saltapi.config.apply_api_config(opts)
        # An injected session belongs to the caller, only close our own
        self._owns_session = session is None
        if session is None:
            session = _build_session(self.opts["http_opts"])
        self.session = session
        self._executor = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        """
        Wait for pending async requests and release the HTTP session if it
        was created by this client
        """
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        if self._owns_session:
            self.session.close()

    # ----- Authentication ------------------------------------------------->
    def endpoint(self):
        return saltapi.auth.endpoint(self.opts)

    def credentials(self):
        return saltapi.auth.credentials(self.opts)

    def token(self):
        return saltapi.auth.token(self.opts, self.session)

    # <---- Authentication --------------------------------------------------

    def ping(self):
        """
        Send a test.ping to each of the registered minions
        """
        return self.request("local", "*", "test.ping")

    def local(self, target, function, params=None, mode="sync"):
        """
        Run an execution module function on the targeted minions
        """
        return self.request("local", target, function, params, mode)

    def runner(self, function, params=None, mode="sync"):
        """
        Run a runner module function on the master
        """
        return self.request("runner", "", function, params, mode)

    def wheel(self, function, params=None, mode="sync"):
        """
        Run a wheel module function on the master
        """
        return self.request("wheel", "", function, params, mode)

    def request(self, client, target, function, params=None, mode="sync"):
        """
        Send a request to the salt-api server.

        In ``sync`` mode the decoded response is returned. In ``async`` mode a
        :py:class:`concurrent.futures.Future` is returned right away; it
        resolves to the undecoded, streamed :py:class:`requests.Response`.
        """
        if client not in CLIENTS:
            raise SaltInvocationError(
                "Invalid client '{}', must be one of: {}".format(
                    client, ", ".join(CLIENTS)
                )
            )
        if mode not in MODES:
            raise SaltInvocationError(
                "Invalid mode '{}', must be one of: {}".format(mode, ", ".join(MODES))
            )
        arg, kwarg = parse_params(params)
        payload = make_payload(client, target, function, arg, kwarg)
        log.debug("Sending %s %s request: %s %s", mode, client, target, function)
        return self.call_api(payload, mode)

    def make_headers(self):
        return {
            "Content-type": "application/json",
            "X-Auth-Token": self.token(),
            "Accept": "application/json",
        }

    def _post_async(self, url, payload, headers):
        try:
            return self.session.post(url, data=payload, headers=headers, stream=True)
        except requests.exceptions.RequestException as exc:
            raise SaltClientError(f"Unable to reach {url}: {exc}")

    def call_api(self, payload, mode="sync"):
        url = self.endpoint()
        headers = self.make_headers()
        if mode == "async":
            if self._executor is None:
                self._executor = concurrent.futures.ThreadPoolExecutor(
                    thread_name_prefix="saltapi"
                )
            return self._executor.submit(self._post_async, url, payload, headers)

        timeout = self.opts["timeout"]
        try:
            response = self.session.post(
                url, data=payload, headers=headers, timeout=timeout
            )
        except requests.exceptions.Timeout:
            raise SaltClientTimeout(
                f"Request to {url} did not complete within {timeout} seconds"
            )
        except requests.exceptions.RequestException as exc:
            raise SaltClientError(f"Unable to reach {url}: {exc}")

        if not 200 <= response.status_code < 300:
            log.debug(
                "salt-api returned HTTP %s: %s", response.status_code, response.text
            )
            raise SaltAPIResponseError(
                "salt-api request to {} failed: HTTP {}".format(
                    url, response.status_code
                ),
                status=response.status_code,
            )
        try:
            return decode_results(response.text)
        except ValueError as exc:
            log.debug("salt-api returned a non JSON reply: %s", response.text)
            raise SaltAPIResponseError(
                f"salt-api returned an invalid JSON reply: {exc}",
                status=response.status_code,
            )
