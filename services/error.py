from contextlib import contextmanager
import sys
import traceback
import services.logger as log

l = log.get_logger()


class ChirpError(Exception):
    """Base class for every error raised by chirpterm itself."""


class NetworkError(ChirpError):
    """A non-200 response or a transport failure while fetching."""


class FilesystemError(ChirpError):
    """Creating the attachment directory or writing a file failed."""


class AlreadyLockingError(ChirpError):
    """The advisory flag of a SingleFlagLock is already set."""

    def __init__(self, message: str = "already locking"):
        super().__init__(message)


def _handle_uncaught_exceptions(exc_type, exc_value, exc_traceback):
    """Global exception handler for uncaught exceptions."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    l.critical(
        "Unhandled exception caught:\n"
        + ''.join(traceback.format_exception(exc_type, exc_value, exc_traceback))
    )

# Install global exception hook
sys.excepthook = _handle_uncaught_exceptions

def raise_and_log(message: str, exception_type: type = ChirpError):
    """
    Log an error and then raise the specified exception.

    :param message: Error message to log and include in the exception.
    :param exception_type: Type of exception to raise (default: ChirpError).
    """
    l.error(f"Raising exception: {message}")
    raise exception_type(message)

@contextmanager
def catch_and_log(context_info: str = ""):
    """
    Context manager that logs an exception with some context, then re-raises it.

    :param context_info: Optional context info to include in the log.
    """
    try:
        yield
    except Exception as e:
        msg = f"Exception caught in context '{context_info}': {e}"
        l.error(msg)
        raise
