# kindrewrite/errors.py
"""
Error taxonomy shared by both handlers.

Every error carries the HTTP status it maps to and a message that is safe to
show the caller. Details (upstream bodies, the token, tracebacks) stay in the
server log via the chained exception.
"""


class KindRewriteError(Exception):
    status_code: int = 500
    public_message: str = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)
        if message is not None:
            self.public_message = message

    @property
    def kind(self) -> str:
        return type(self).__name__


class InvalidInput(KindRewriteError):
    status_code = 400
    public_message = "Invalid input"


class ConfigurationError(KindRewriteError):
    public_message = "Server configuration error: HF_TOKEN not set"


class ServiceUnavailable(KindRewriteError):
    status_code = 503
    public_message = "Unable to connect to moderation service. Please try again."


class ModerationFailed(KindRewriteError):
    public_message = "Failed to analyze message. Please try again."


class UpstreamFormatError(ModerationFailed):
    # Keep the caller message generic; the specific problem goes to the log.
    def __init__(self, detail: str) -> None:
        super().__init__()
        self.detail = detail

    def __str__(self) -> str:
        return f"Unexpected API response format: {self.detail}"


class InternalError(KindRewriteError):
    public_message = "Failed to rewrite message. Please try again."
