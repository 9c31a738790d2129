class RelayError(Exception):
    """Base error for the relay pipeline."""


class ReferenceFetchError(RelayError):
    """A replied-to message could not be fetched; the event cannot be rendered."""

    def __init__(self, channel_id: str, message_id: str, reason: str = ""):
        self.channel_id = channel_id
        self.message_id = message_id
        message = f"Failed to fetch referenced message {message_id} in channel {channel_id}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class AttachmentFetchError(RelayError):
    """An attachment could not be streamed from Discord's CDN."""
