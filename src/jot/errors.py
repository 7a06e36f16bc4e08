"""Base error types for Jot.

Every error that can reach a user-visible boundary (CLI, HTTP service)
derives from JotError so it can be flattened to a short message.
"""


class JotError(Exception):
    """Base exception for Jot errors."""

    pass


class NoAudioError(JotError):
    """Raised when a voice interaction is started without an audio payload."""

    pass


class PipelineBusyError(JotError):
    """Raised when a voice interaction starts while another is still processing."""

    pass


def user_message(error: BaseException) -> str:
    """Flatten an error to a short human-readable message.

    Args:
        error: The exception to describe.

    Returns:
        Message suitable for showing to the user.
    """
    if isinstance(error, NoAudioError):
        return "No audio was recorded. Please try again."
    if isinstance(error, PipelineBusyError):
        return "Still working on your last recording. Please wait a moment."
    if isinstance(error, JotError) and str(error):
        return str(error)
    return "Sorry, I couldn't process that. Please try again."


__all__ = ["JotError", "NoAudioError", "PipelineBusyError", "user_message"]
