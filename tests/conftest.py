# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Shared fixtures for prgraph tests.
"""

import base64
import json
from unittest.mock import Mock

import pytest

from prgraph.classes import DecorationConfig, PullRequest
from prgraph.constants import PROVISIONER_ID_ENV, ROUTING_KEY_ENV, WORKER_TYPE_ENV


def _encode_content(value) -> dict:
    raw = value if isinstance(value, bytes) else json.dumps(value).encode('utf-8')
    return {'encoding': 'base64', 'content': base64.b64encode(raw).decode('ascii')}


@pytest.fixture
def encode_content():
    """Shape a value the way the GitHub contents API returns a file."""
    return _encode_content


@pytest.fixture
def pr_payload():
    """GitHub pull request payload for PR #42 by alice."""
    return {
        'number': 42,
        'html_url': 'https://github.com/o/r/pull/42',
        'base': {
            'label': 'o:main',
            'sha': 'abc',
            'repo': {'id': 7, 'full_name': 'o/r', 'html_url': 'https://github.com/o/r'},
        },
        'head': {
            'sha': 'def',
            'user': {'login': 'alice'},
            'repo': {'name': 'r'},
        },
    }


@pytest.fixture
def pull_request(pr_payload):
    return PullRequest.from_github_response(pr_payload)


@pytest.fixture
def decoration_config():
    return DecorationConfig(provisioner_id='test-provisioner', worker_type='test-worker', routing_key_prefix='test-route')


@pytest.fixture
def github():
    """GitHub client double; alice has a public email."""
    client = Mock()
    client.get_user.return_value = {'login': 'alice', 'email': 'alice@example.com'}
    client.get_content.return_value = _encode_content({'tasks': {'build': {'task': {'payload': {}}}}})
    return client


@pytest.fixture
def clean_env(monkeypatch):
    """Remove decoration overrides from the environment."""
    for name in (PROVISIONER_ID_ENV, WORKER_TYPE_ENV, ROUTING_KEY_ENV):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
