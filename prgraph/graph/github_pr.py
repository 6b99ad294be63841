# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Creates a task graph from a GitHub pull request.

The graph is read from `taskgraph.json` in the pull request's head repository
and decorated with details of the pull request (environment variables, tags,
owner and routing) before it is handed to the task-execution service.
"""

import base64
import binascii
import json
from typing import Any, Dict, Mapping, Optional, Union

import bittensor as bt

from prgraph.classes import DecorationConfig, PullRequest, as_pull_request
from prgraph.constants import FAKE_EMAIL_DOMAIN, TASKGRAPH_PATH
from prgraph.errors import FetchError, OwnerLookupError, ParseError, ValidationError
from prgraph.graph.factory import create_graph
from prgraph.utils.github_api_tools import GitHubApi, GitHubApiError

PullRequestLike = Union[PullRequest, Mapping[str, Any]]


def pull_request_resultset_id(pull_request: PullRequestLike) -> str:
    """Resultset id for a pull request, e.g. `pr-42-7` for PR #42 of repo id 7."""
    return as_pull_request(pull_request).resultset_id


def fetch_owner_from_login(github: GitHubApi, login: str) -> str:
    """Fetch the email address for a GitHub login.

    Users without a public email get `<login>@github.taskcluster.net`.

    Raises:
        OwnerLookupError: The user lookup failed.
    """
    try:
        user = github.get_user(login)
    except GitHubApiError as e:
        raise OwnerLookupError(login, str(e)) from e

    email = (user or {}).get('email')
    if email:
        return email
    return f"{login}@{FAKE_EMAIL_DOMAIN}"


def _decode_graph(content: Any) -> Any:
    if not isinstance(content, Mapping) or not isinstance(content.get('content'), str):
        raise ParseError(f"{TASKGRAPH_PATH} response has no file content")

    try:
        raw = base64.b64decode(content['content'])
        return json.loads(raw.decode('utf-8'))
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise ParseError(f"{TASKGRAPH_PATH} is not valid JSON: {e}") from e


def fetch_graph(github: GitHubApi, pull_request: PullRequestLike) -> Any:
    """Fetch the graph (but do not decorate it) from the pull request's head repository.

    Raises:
        FetchError: The file could not be retrieved (missing, no permission, network).
        ParseError: The file is not base64 encoded UTF-8 JSON.
    """
    pr = as_pull_request(pull_request)
    bt.logging.debug(f"Fetching {TASKGRAPH_PATH} from {pr.head_repository} for PR #{pr.number}")

    try:
        content = github.get_content(pr.head_user_login, pr.head_repo_name, TASKGRAPH_PATH)
    except GitHubApiError as e:
        raise FetchError(pr.head_repository, TASKGRAPH_PATH, str(e)) from e

    return _decode_graph(content)


def build_envs(pull_request: PullRequest) -> Dict[str, Any]:
    """Environment variables for every task. These never override values set in the task."""
    return {
        'CI': True,
        'GH_BRANCH': pull_request.branch,
        'GH_COMMIT': pull_request.base_sha,
        'GH_PULL_REQUEST': 'true',
        'GH_PULL_REQUEST_NUMBER': pull_request.number,
        'GH_REPO_SLUG': pull_request.base_repo_full_name,
    }


def build_tags(pull_request: PullRequest) -> Dict[str, Any]:
    """Tags for every task. These always override values set in the task."""
    return {
        'commit': pull_request.head_sha,
        'repository': pull_request.base_repo_html_url,
        'pullRequest': pull_request.html_url,
        'githubUsername': pull_request.head_user_login,
        'treeherderResultset': pull_request.resultset_id,
    }


def _mapping_field(container: Mapping[str, Any], key: str, where: str) -> Dict[str, Any]:
    value = container.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValidationError(f"{where}.{key} must be an object, got {type(value).__name__}")
    return dict(value)


def build_task_definition(
    name: str,
    definition: Mapping[str, Any],
    envs: Mapping[str, Any],
    tags: Mapping[str, Any],
    meta: Mapping[str, Any],
    config: DecorationConfig,
) -> Dict[str, Any]:
    """Return a new task definition decorated with the pull request details."""
    if not isinstance(definition, Mapping):
        raise ValidationError(f"Task '{name}' must be an object with a 'task' definition")

    payload = _mapping_field(definition, 'payload', f"{name}.task")
    task_envs = _mapping_field(payload, 'env', f"{name}.task.payload")
    task_tags = _mapping_field(definition, 'tags', f"{name}.task")
    task_meta = _mapping_field(definition, 'metadata', f"{name}.task")

    task_tags.update(tags)
    task_meta.update(meta)
    for key, value in envs.items():
        task_envs.setdefault(key, value)

    payload['env'] = task_envs
    return {
        **definition,
        'payload': payload,
        'tags': task_tags,
        'metadata': task_meta,
        # Server-side defaults so these can be changed without touching every repository
        'provisionerId': definition.get('provisionerId') or config.provisioner_id,
        'workerType': definition.get('workerType') or config.worker_type,
    }


def decorate_graph(
    graph: Any,
    github: GitHubApi,
    pull_request: PullRequestLike,
    config: Optional[DecorationConfig] = None,
) -> Dict[str, Any]:
    """Decorate the given graph with the pull request data.

    The input graph is not modified; a new, fully defaulted graph is returned.

    Args:
        graph: Raw graph as returned by `fetch_graph`.
        github: Client used to resolve the owner email.
        pull_request: PullRequest or raw GitHub pull request payload.
        config: Provisioner/worker/routing defaults. Read from the environment when omitted.

    Raises:
        ValidationError: The graph has no usable `tasks` mapping.
        OwnerLookupError: The owner email could not be resolved.
    """
    pr = as_pull_request(pull_request)
    if config is None:
        config = DecorationConfig.from_env()

    if not isinstance(graph, Mapping):
        raise ValidationError(f"Task graph must be an object, got {type(graph).__name__}")
    tasks = graph.get('tasks')
    if not isinstance(tasks, Mapping):
        raise ValidationError("Task graph must contain a 'tasks' object mapping task names to tasks")

    envs = build_envs(pr)
    tags = build_tags(pr)
    meta = {'owner': fetch_owner_from_login(github, pr.head_user_login)}

    decorated_tasks = {}
    for name, record in tasks.items():
        if not isinstance(record, Mapping):
            raise ValidationError(f"Task '{name}' must be an object with a 'task' definition")
        decorated_tasks[name] = {
            **record,
            'task': build_task_definition(name, record.get('task'), envs, tags, meta, config),
        }

    # Overridden in all cases so notifications arrive for each task and for the graph
    decorated = {**graph, 'tasks': decorated_tasks, 'routing': config.routing}

    bt.logging.info(
        f"Decorated {len(decorated_tasks)} task(s) for PR #{pr.number} "
        f"({pr.base_repo_full_name}, resultset {pr.resultset_id}, owner {meta['owner']})"
    )
    return create_graph(decorated)
