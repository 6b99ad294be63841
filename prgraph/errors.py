# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Errors raised while fetching and decorating pull request task graphs.

Nothing in prgraph catches these; every failure reaches the caller, who must
discard any partially built graph.
"""


class PRGraphError(Exception):
    """Base class for all prgraph failures."""


class OwnerLookupError(PRGraphError, LookupError):
    """The GitHub user lookup for the graph owner failed."""

    def __init__(self, login: str, message: str):
        super().__init__(f"Could not resolve owner for GitHub user '{login}': {message}")
        self.login = login


class FetchError(PRGraphError):
    """The task graph file could not be retrieved from the head repository."""

    def __init__(self, repository: str, path: str, message: str):
        super().__init__(f"Could not fetch {path} from {repository}: {message}")
        self.repository = repository
        self.path = path


class ParseError(PRGraphError, ValueError):
    """The retrieved task graph file is not valid base64 encoded UTF-8 JSON."""


class ValidationError(PRGraphError, ValueError):
    """A graph or pull request payload is structurally unusable."""
