# The MIT License (MIT)
# Copyright © 2025 Entrius

# =============================================================================
# GitHub API
# =============================================================================
BASE_GITHUB_API_URL = "https://api.github.com"
GITHUB_API_TIMEOUT_SECONDS = 30

RATE_LIMIT_MIN_REMAINING = 10  # Remaining requests below which we warn

# =============================================================================
# Task Graph
# =============================================================================
TASKGRAPH_PATH = "taskgraph.json"
GRAPH_SCHEMA_VERSION = "0.2.0"

# Owner emails are synthesized under this domain when GitHub has no public email
FAKE_EMAIL_DOMAIN = "github.taskcluster.net"

# Pull request resultset ids look like pr-<number>-<repo id>
RESULTSET_ID_PREFIX = "pr"

# =============================================================================
# Decoration defaults (overridable from the environment)
# =============================================================================
PROVISIONER_ID_ENV = "TASKCLUSTER_PROVISIONER_ID"
WORKER_TYPE_ENV = "TASKCLUSTER_WORKER_TYPE"
ROUTING_KEY_ENV = "TASKCLUSTER_ROUTING_KEY"
GITHUB_TOKEN_ENV = "GITHUB_TOKEN"

DEFAULT_PROVISIONER_ID = "aws-provisioner"
DEFAULT_WORKER_TYPE = "ami-f44128c4"
DEFAULT_ROUTING_KEY = "taskcluster-github"

# =============================================================================
# Task defaults applied by the graph factory
# =============================================================================
DEFAULT_TASK_RETRIES = 1
DEFAULT_TASK_PRIORITY = 5
DEFAULT_TASK_RERUNS = 0
