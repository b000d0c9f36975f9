from pathlib import Path


class PublishAppError(Exception):
    """Base user-facing application error."""

    hint: str | None = None


class RuleFileError(PublishAppError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class RuleFileNotFoundError(RuleFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path=path, message="Rule file not found or not readable")


class ConversionError(PublishAppError):
    """A format handler could not build a blueprint."""


class AuthError(PublishAppError):
    """Missing or rejected channel credentials. Raised before any mutating call."""

    def __init__(self, message: str, remediation: str | None = None) -> None:
        self.message = message
        self.remediation = remediation
        self.hint = remediation
        super().__init__(message)


class GitHubAuthError(AuthError):
    pass


class HubAuthError(AuthError):
    pass


class ChannelError(PublishAppError):
    def __init__(
        self,
        channel: str,
        message: str,
        status_code: int | None = None,
        hint: str | None = None,
    ) -> None:
        self.channel = channel
        self.message = message
        self.status_code = status_code
        self.hint = hint
        super().__init__(message)


class RepositoryNotFoundError(ChannelError):
    def __init__(self, repository: str) -> None:
        self.repository = repository
        super().__init__(
            channel="github",
            message=f"Repository {repository} not found or not accessible.",
            status_code=404,
            hint="Check that the repository exists and your token can read it.",
        )


class HubError(ChannelError):
    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str = "UNKNOWN",
        retryable: bool = False,
    ) -> None:
        self.error_code = error_code
        self.retryable = retryable
        super().__init__(
            channel="hub",
            message=message,
            status_code=status_code,
            hint="Try again later, or publish with --github instead.",
        )
