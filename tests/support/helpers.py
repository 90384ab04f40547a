"""
    tests.support.helpers
    ~~~~~~~~~~~~~~~~~~~~~

    Test support helpers
"""

from unittest.mock import MagicMock

import requests

ENDPOINT = "https://salt.example.com:8000"
TOKEN = "6d1b722e2e1dd5a4e9ab36e8d1aaa1e8c0d1d5a7"


def make_response(status_code=200, body=b"", headers=None):
    """
    Build a real, already consumed, ``requests.Response``
    """
    if isinstance(body, str):
        body = body.encode("utf-8")
    response = requests.Response()
    response.status_code = status_code
    response._content = body
    response._content_consumed = True
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    return response


class SaltAPIServer:
    """
    Answers the requests sent through a mocked ``requests.Session``
    """

    def __init__(self):
        self.login_response = make_response(
            200,
            '{"return": [{"token": "%s", "eauth": "pam", "user": "saltdev"}]}' % TOKEN,
            {"X-Auth-Token": TOKEN, "Content-Type": "application/json"},
        )
        self.command_response = make_response(
            200,
            '{"return": [{"web1": true, "web2": true}]}',
            {"Content-Type": "application/json"},
        )
        self.session = MagicMock(spec=requests.Session)
        self.session.post.side_effect = self._post

    def _post(self, url, **kwargs):
        if url.endswith("/login"):
            response = self.login_response
        else:
            response = self.command_response
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def calls(self):
        return self.session.post.call_args_list

    @property
    def login_calls(self):
        return [call for call in self.calls if call.args[0].endswith("/login")]

    @property
    def command_calls(self):
        return [call for call in self.calls if not call.args[0].endswith("/login")]
