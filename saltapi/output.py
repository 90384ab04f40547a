"""
A simple way of setting the output format for data returned by salt-api
"""

import json
import logging
import pprint
import sys

import yaml

from saltapi.client import ReturnData

__all__ = ("get_outputter", "display_output")

log = logging.getLogger(__name__)


class SafeReturnDumper(yaml.SafeDumper):
    """
    A safe dumper which knows how to represent ReturnData
    """


SafeReturnDumper.add_representer(
    ReturnData, lambda dumper, data: dumper.represent_dict(dict(data))
)


class Outputter:
    """
    Class for outputting data to the screen.
    """

    supports = None

    @classmethod
    def check(cls, name):
        return cls.supports == name

    def __call__(self, data, stream=None, **kwargs):
        pprint.pprint(data, stream=stream or sys.stdout)


class RawOutputter(Outputter):
    """
    Raw output. This calls repr() on the returned data.
    """

    supports = "raw"

    def __call__(self, data, stream=None, **kwargs):
        print(repr(data), file=stream or sys.stdout)


class TxtOutputter(Outputter):
    """
    Plain text output. Primarily for returning output from shell commands
    in the exact same way they would output on the shell when ran directly.
    """

    supports = "txt"

    def __call__(self, data, stream=None, **kwargs):
        stream = stream or sys.stdout
        if hasattr(data, "keys"):
            for key in data:
                value = data[key]
                # Don't blow up on non-strings
                try:
                    for line in value.split("\n"):
                        print(f"{key}: {line}", file=stream)
                except AttributeError:
                    print(f"{key}: {value}", file=stream)
        else:
            # For non-dictionary data, just use print
            print(data, file=stream)


class JSONOutputter(Outputter):
    """
    JSON output.
    """

    supports = "json"

    def __call__(self, data, stream=None, indent=4, **kwargs):
        try:
            ret = json.dumps(data, indent=indent)
        except TypeError:
            log.debug("Unable to serialize %r as JSON", data, exc_info=True)
            # Return valid json for unserializable objects
            ret = json.dumps({})
        print(ret, file=stream or sys.stdout)


class YamlOutputter(Outputter):
    """
    Yaml output. All of the cool kids are doing it.
    """

    supports = "yaml"

    def __call__(self, data, stream=None, **kwargs):
        print(
            yaml.dump(data, Dumper=SafeReturnDumper, default_flow_style=False),
            end="",
            file=stream or sys.stdout,
        )


def get_outputter(name=None):
    """
    Factory function for returning the right output class.

    Usage:
        printout = get_outputter("json")
        printout(ret)
    """
    for outputter in Outputter.__subclasses__():
        if outputter.check(name):
            return outputter()
    return Outputter()


def display_output(data, out=None, stream=None):
    """
    Display the output of a command in the terminal
    """
    get_outputter(out)(data, stream=stream)
