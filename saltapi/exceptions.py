"""
This module is a central location for all saltapi exceptions
"""


def get_error_message(error):
    """
    Get human readable message from Python Exception
    """
    return error.args[0] if error.args else ""


class SaltAPIException(Exception):
    """
    Base exception class; all saltapi-specific exceptions should subclass this
    """

    def __init__(self, message=""):
        if isinstance(message, bytes):
            message = message.decode("utf-8", "replace")
        elif not isinstance(message, str):
            message = str(message)
        super().__init__(message)
        self.message = self.strerror = message

    def pack(self):
        """
        Pack this exception into a serializable dictionary
        """
        return {"message": str(self), "args": self.args}


class SaltConfigurationError(SaltAPIException):
    """
    Configuration error
    """


class SaltInvocationError(SaltAPIException, TypeError):
    """
    Used when the wrong number of arguments are sent to modules or invalid
    arguments are specified on the command line
    """


class EauthAuthenticationError(SaltAPIException):
    """
    Thrown when eauth authentication fails
    """


class SaltClientError(SaltAPIException):
    """
    Problem talking to the salt-api server
    """


class SaltClientTimeout(SaltClientError):
    """
    Thrown when a request to the salt-api server does not complete in time
    """


class SaltAPIResponseError(SaltClientError):
    """
    The salt-api server answered a command with a non-success HTTP status
    """

    def __init__(self, message="", status=None):
        super().__init__(message)
        self.status = status

    def pack(self):
        ret = super().pack()
        ret["status"] = self.status
        return ret
