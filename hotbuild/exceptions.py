class HotbuildError(Exception):
    """Base class for errors raised by hotbuild"""
    pass


class StartupError(HotbuildError):
    """Exception raised when the configuration cannot be resolved at startup"""

    def __init__(self, message, original_error=None):
        self.message = message
        self.original_error = original_error
        if original_error is not None:
            message = f"{message}: {original_error}"
        super().__init__(message)
