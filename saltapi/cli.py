"""
CLI entry-point for saltapi

.. code-block:: bash

    saltapi '*' test.ping
    saltapi 'web-*' cmd.run 'uptime' runas=nobody
    saltapi --client runner manage.up
    saltapi --client wheel key.list_all
"""

import logging
import optparse
import re
import sys

import saltapi.client
import saltapi.config
import saltapi.exitcodes
import saltapi.log
import saltapi.output
import saltapi.version
from saltapi.exceptions import (
    EauthAuthenticationError,
    SaltAPIException,
    SaltAPIResponseError,
    SaltClientError,
    SaltClientTimeout,
    SaltConfigurationError,
    SaltInvocationError,
)

log = logging.getLogger(__name__)

KWARG_REGEX = re.compile(r"^([^\d\W][\w.-]*)=(?!=)(.*)$", re.UNICODE)

# Most specific exceptions first
EXIT_CODES = (
    (SaltConfigurationError, saltapi.exitcodes.EX_CONFIG),
    (SaltInvocationError, saltapi.exitcodes.EX_USAGE),
    (EauthAuthenticationError, saltapi.exitcodes.EX_NOPERM),
    (SaltClientTimeout, saltapi.exitcodes.EX_TEMPFAIL),
    (SaltAPIResponseError, saltapi.exitcodes.EX_PROTOCOL),
    (SaltClientError, saltapi.exitcodes.EX_UNAVAILABLE),
)


def parse_input(args):
    """
    Split command line arguments into positional arguments and ``key=value``
    keyword arguments
    """
    arg = []
    kwarg = {}
    for item in args:
        match = KWARG_REGEX.match(item)
        if match:
            kwarg[match.group(1)] = match.group(2)
        else:
            arg.append(item)
    return arg, kwarg


class SaltAPICall(optparse.OptionParser):
    """
    The cli parser object used to send commands to a salt-api server.
    """

    VERSION = saltapi.version.__version__

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("prog", "saltapi")
        kwargs.setdefault(
            "usage",
            "%prog [options] <target> <function> [arguments]\n"
            "       %prog --client runner|wheel [options] <function> [arguments]",
        )
        kwargs.setdefault("version", f"%prog {self.VERSION}")
        super().__init__(*args, **kwargs)
        self.config = None
        self._setup_options()

    def _setup_options(self):
        self.add_option(
            "-c",
            "--config",
            default=saltapi.config.DEFAULT_CONFIG_PATH,
            help="Path to the saltapi configuration file. Default: %default",
        )
        self.add_option(
            "--client",
            default="local",
            choices=saltapi.client.CLIENTS,
            help="The salt client to use, one of: {}. Default: %default".format(
                ", ".join(saltapi.client.CLIENTS)
            ),
        )
        self.add_option(
            "--async",
            dest="async_",
            default=False,
            action="store_true",
            help="Do not decode the reply, stream it as it arrives",
        )
        self.add_option(
            "--ping",
            default=False,
            action="store_true",
            help="Send test.ping to every minion",
        )
        self.add_option(
            "--out",
            default="yaml",
            choices=("yaml", "json", "raw", "txt"),
            help="Output format. Default: %default",
        )
        self.add_option(
            "-l",
            "--log-level",
            dest="log_level",
            default=None,
            choices=saltapi.log.SORTED_LEVEL_NAMES,
            help="Console logging log level, overrides the configuration file",
        )
        group = optparse.OptionGroup(
            self, "Connection", "Override values from the configuration file"
        )
        group.add_option("-e", "--endpoint", help="The salt-api URL")
        group.add_option("-u", "--user", help="The eauth user")
        group.add_option("-a", "--eauth", help="The eauth backend, ie, pam")
        group.add_option(
            "--password-file",
            dest="password_file",
            help="Read the eauth password from this file",
        )
        self.add_option_group(group)

    def setup_config(self):
        opts = saltapi.config.load_config(
            self.options.config, "SALTAPI_CONFIG", saltapi.config.DEFAULT_CONFIG_PATH
        )
        for key in ("endpoint", "user", "eauth", "log_level"):
            value = getattr(self.options, key)
            if value is not None:
                opts[key] = value
        if self.options.password_file is not None:
            opts["pass"] = {
                "function": "saltapi.auth.password_reader",
                "args": [self.options.password_file],
            }
        return saltapi.config.apply_api_config(opts)

    def build_request(self):
        """
        Return the ``(client, target, function, params)`` to send
        """
        if self.options.ping:
            return "local", "*", "test.ping", {}

        args = list(self.args)
        client = self.options.client
        if client == "local":
            if len(args) < 2:
                self.error("A target and a function are required")
            target = args.pop(0)
        else:
            if not args:
                self.error("A function is required")
            target = ""
        function = args.pop(0)
        arg, kwarg = parse_input(args)
        return client, target, function, {"arg": arg, "kwarg": kwarg}

    def run(self, args=None):
        """
        Execute the command, returning the process exit code
        """
        self.options, self.args = self.parse_args(args)
        client, target, function, params = self.build_request()
        try:
            self.config = self.setup_config()
            saltapi.log.setup_console_handler(
                self.config["log_level"],
                self.config["log_fmt_console"],
                self.config["log_datefmt"],
            )
            with saltapi.client.SaltAPIClient(self.config) as api:
                mode = "async" if self.options.async_ else "sync"
                ret = api.request(client, target, function, params, mode)
                if mode == "async":
                    self._stream(ret.result())
                else:
                    saltapi.output.display_output(ret, self.options.out)
        except SaltAPIException as exc:
            log.error(exc)
            for exc_class, exitcode in EXIT_CODES:
                if isinstance(exc, exc_class):
                    return exitcode
            return saltapi.exitcodes.EX_GENERIC
        return saltapi.exitcodes.EX_OK

    def _stream(self, response):
        with response:
            for chunk in response.iter_content(chunk_size=None, decode_unicode=True):
                if isinstance(chunk, bytes):
                    chunk = chunk.decode("utf-8", "replace")
                sys.stdout.write(chunk)
        sys.stdout.write("\n")
        sys.stdout.flush()


def salt_api_call():
    """
    The main function for saltapi
    """
    sys.exit(SaltAPICall().run())


if __name__ == "__main__":
    salt_api_call()
