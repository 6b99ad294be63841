# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Task graphs built from GitHub pull requests.

Usage:
    github = GitHubClient(token=...)
    graph = fetch_graph(github, pull_request)
    graph = decorate_graph(graph, github, pull_request)
"""

from .factory import create_graph
from .github_pr import (
    decorate_graph,
    fetch_graph,
    fetch_owner_from_login,
    pull_request_resultset_id,
)

__all__ = [
    'create_graph',
    'decorate_graph',
    'fetch_graph',
    'fetch_owner_from_login',
    'pull_request_resultset_id',
]
