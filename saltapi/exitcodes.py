"""
Classification of saltapi exit codes.  These are intended to augment
universal exit codes (found in Python's `os` module with the `EX_`
prefix or in `sysexits.h`).
"""

# Too many situations use "exit 1" - try not to use it when something
# else is more appropriate.
EX_GENERIC = 1

EX_OK = 0  # No error occurred
EX_USAGE = 64  # The command was used incorrectly
EX_UNAVAILABLE = 69  # The salt-api server could not be reached
EX_SOFTWARE = 70  # Internal software error was detected
EX_TEMPFAIL = 75  # The request timed out
EX_PROTOCOL = 76  # The server answered with an error status
EX_NOPERM = 77  # Authentication against the salt-api server failed
EX_CONFIG = 78  # Configuration error occurred
