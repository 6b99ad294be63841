# The MIT License (MIT)
# Copyright © 2025 Entrius

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from prgraph.constants import (
    DEFAULT_PROVISIONER_ID,
    DEFAULT_ROUTING_KEY,
    DEFAULT_WORKER_TYPE,
    PROVISIONER_ID_ENV,
    RESULTSET_ID_PREFIX,
    ROUTING_KEY_ENV,
    WORKER_TYPE_ENV,
)
from prgraph.errors import ValidationError


@dataclass(frozen=True)
class PullRequest:
    """The parts of a GitHub pull request that graph decoration reads"""

    number: int
    base_repo_id: Union[int, str]
    base_repo_full_name: str
    base_repo_html_url: str
    base_label: str
    base_sha: str
    head_user_login: str
    head_repo_name: str
    head_sha: str
    html_url: str

    @property
    def branch(self) -> str:
        """Base branch name without the `owner:` prefix GitHub puts on labels."""
        return self.base_label.split(':')[-1]

    @property
    def resultset_id(self) -> str:
        # repo id stays the same when the repository is renamed, the name does not
        return f"{RESULTSET_ID_PREFIX}-{self.number}-{self.base_repo_id}"

    @property
    def head_repository(self) -> str:
        return f"{self.head_user_login}/{self.head_repo_name}"

    @classmethod
    def from_github_response(cls, pr_data: Mapping[str, Any]) -> 'PullRequest':
        """Create PullRequest from a GitHub REST (or webhook) pull request payload"""
        try:
            base = pr_data['base']
            head = pr_data['head']
            return cls(
                number=pr_data['number'],
                base_repo_id=base['repo']['id'],
                base_repo_full_name=base['repo']['full_name'],
                base_repo_html_url=base['repo']['html_url'],
                base_label=base['label'],
                base_sha=base['sha'],
                head_user_login=head['user']['login'],
                head_repo_name=head['repo']['name'],
                head_sha=head['sha'],
                html_url=pr_data['html_url'],
            )
        except (KeyError, TypeError) as e:
            raise ValidationError(f"Pull request payload is missing required field: {e}") from e


def as_pull_request(pull_request: Union[PullRequest, Mapping[str, Any]]) -> PullRequest:
    """Accept either a PullRequest or a raw GitHub payload."""
    if isinstance(pull_request, PullRequest):
        return pull_request
    return PullRequest.from_github_response(pull_request)


@dataclass(frozen=True)
class DecorationConfig:
    """Defaults applied to every decorated task and the graph routing key"""

    provisioner_id: str = DEFAULT_PROVISIONER_ID
    worker_type: str = DEFAULT_WORKER_TYPE
    routing_key_prefix: str = DEFAULT_ROUTING_KEY

    @property
    def routing(self) -> str:
        return f"{self.routing_key_prefix}."

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'DecorationConfig':
        """Read the configuration from the environment at call time.

        Unset or empty variables fall back to the built-in defaults.
        """
        env = os.environ if environ is None else environ
        return cls(
            provisioner_id=env.get(PROVISIONER_ID_ENV) or DEFAULT_PROVISIONER_ID,
            worker_type=env.get(WORKER_TYPE_ENV) or DEFAULT_WORKER_TYPE,
            routing_key_prefix=env.get(ROUTING_KEY_ENV) or DEFAULT_ROUTING_KEY,
        )
