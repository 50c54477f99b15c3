from pyhydra.proto.address import InvalidAddress


class HydraError(Exception):
    """Base class for everything raised by pyhydra.client."""


class ConfigError(HydraError, ValueError):
    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(
            "Missing required configuration: {}".format(", ".join(self.missing))
        )


class SnapshotUnavailable(HydraError):
    def __init__(self, url: str, reason: str, status: int = None):
        super().__init__("Snapshot at {} unavailable: {}".format(url, reason))
        self.url = url
        self.reason = reason
        self.status = status


class SnapshotParseError(HydraError):
    def __init__(self, url: str, reason: str, key: str = None):
        super().__init__("Malformed snapshot from {}: {}".format(url, reason))
        self.url = url
        self.reason = reason
        self.key = key


class SubmissionError(HydraError):
    def __init__(self, endpoint: str, correlation_id: str, reason: str):
        super().__init__(
            "Submission {} to {} failed: {}".format(correlation_id, endpoint, reason)
        )
        self.endpoint = endpoint
        self.correlation_id = correlation_id
        self.reason = reason


class SubmissionRejected(SubmissionError):
    """The endpoint answered, but with an application-level error."""
    def __init__(self, endpoint: str, correlation_id: str, reason: str, error: dict = None):
        super().__init__(endpoint, correlation_id, "rejected: {}".format(reason))
        self.reason = reason
        self.error = error


class CommitError(HydraError):
    def __init__(self, commit_args, reason: str):
        super().__init__("Commit of {} failed: {}".format(commit_args, reason))
        self.commit_args = commit_args
        self.reason = reason


class MissingCommitArgs(HydraError):
    def __init__(self):
        super().__init__("Head asked for a commit but no UTxO reference was supplied")


class ProtocolFault(HydraError):
    def __init__(self, mode: str, event, reason: str):
        super().__init__("{} session cannot handle {}: {}".format(mode, event, reason))
        self.mode = mode
        self.event = event
        self.reason = reason


class ConnectionLost(HydraError):
    def __init__(self, url: str, reason: str = "connection closed"):
        super().__init__("Lost connection to {}: {}".format(url, reason))
        self.url = url
        self.reason = reason


__all__ = [
    "CommitError",
    "ConfigError",
    "ConnectionLost",
    "HydraError",
    "InvalidAddress",
    "MissingCommitArgs",
    "ProtocolFault",
    "SnapshotParseError",
    "SnapshotUnavailable",
    "SubmissionError",
    "SubmissionRejected",
]
