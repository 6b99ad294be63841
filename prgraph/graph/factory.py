# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Task graph factory.

Fills in every field a task graph submission needs but a committed
`taskgraph.json` is allowed to leave out. Values already present always win,
including inside nested mappings.
"""

import copy
from typing import Any, Dict, Mapping

from prgraph.constants import (
    DEFAULT_TASK_PRIORITY,
    DEFAULT_TASK_RERUNS,
    DEFAULT_TASK_RETRIES,
    GRAPH_SCHEMA_VERSION,
)
from prgraph.errors import ValidationError


def _empty_metadata() -> Dict[str, str]:
    return {'name': '', 'description': '', 'owner': '', 'source': ''}


def graph_defaults() -> Dict[str, Any]:
    return {
        'version': GRAPH_SCHEMA_VERSION,
        'routing': '',
        'scopes': [],
        'tags': {},
        'metadata': _empty_metadata(),
    }


def task_record_defaults() -> Dict[str, Any]:
    return {
        'requires': [],
        'reruns': DEFAULT_TASK_RERUNS,
    }


def task_definition_defaults() -> Dict[str, Any]:
    return {
        'version': GRAPH_SCHEMA_VERSION,
        'routing': '',
        'retries': DEFAULT_TASK_RETRIES,
        'priority': DEFAULT_TASK_PRIORITY,
        'scopes': [],
        'payload': {},
        'tags': {},
        'metadata': _empty_metadata(),
    }


def fill_defaults(value: Mapping[str, Any], defaults: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of `value` with missing keys taken from `defaults`.

    Nested mappings present on both sides are merged the same way.
    """
    result = copy.deepcopy(dict(value))
    for key, default in defaults.items():
        if key not in result or result[key] is None:
            result[key] = copy.deepcopy(default)
        elif isinstance(default, Mapping) and default and isinstance(result[key], Mapping):
            result[key] = fill_defaults(result[key], default)
    return result


def create_graph(graph: Mapping[str, Any]) -> Dict[str, Any]:
    """Build a complete task graph from a (possibly partial) one.

    Args:
        graph: Graph with a `tasks` mapping of task name -> task record.

    Returns:
        A new graph dict; the input is left untouched.

    Raises:
        ValidationError: The graph or its `tasks` field is not a mapping.
    """
    if not isinstance(graph, Mapping):
        raise ValidationError(f"Task graph must be an object, got {type(graph).__name__}")

    tasks = graph.get('tasks')
    if not isinstance(tasks, Mapping):
        raise ValidationError("Task graph must contain a 'tasks' object mapping task names to tasks")

    result = fill_defaults({k: v for k, v in graph.items() if k != 'tasks'}, graph_defaults())
    result['tasks'] = {}
    for name, record in tasks.items():
        if not isinstance(record, Mapping) or not isinstance(record.get('task'), Mapping):
            raise ValidationError(f"Task '{name}' must be an object with a 'task' definition")

        filled = fill_defaults(record, task_record_defaults())
        filled['task'] = fill_defaults(record['task'], task_definition_defaults())
        result['tasks'][name] = filled

    return result
