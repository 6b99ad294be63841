# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Tests for the task graph factory.
"""

import pytest

from prgraph.errors import ValidationError
from prgraph.graph.factory import create_graph, fill_defaults


class TestFillDefaults:
    def test_existing_values_win(self):
        assert fill_defaults({'a': 1}, {'a': 2, 'b': 3}) == {'a': 1, 'b': 3}

    def test_nested_mappings_merge(self):
        result = fill_defaults({'metadata': {'owner': 'x'}}, {'metadata': {'owner': '', 'name': ''}})
        assert result == {'metadata': {'owner': 'x', 'name': ''}}

    def test_none_is_replaced(self):
        assert fill_defaults({'scopes': None}, {'scopes': []}) == {'scopes': []}

    def test_defaults_are_not_shared(self):
        defaults = {'scopes': []}
        result = fill_defaults({}, defaults)
        result['scopes'].append('queue:*')
        assert defaults == {'scopes': []}


class TestCreateGraph:
    def test_fills_graph_and_task_defaults(self):
        graph = create_graph({'tasks': {'build': {'task': {}}}})

        assert graph['version'] == '0.2.0'
        assert graph['routing'] == ''
        assert graph['metadata'] == {'name': '', 'description': '', 'owner': '', 'source': ''}
        record = graph['tasks']['build']
        assert record['requires'] == []
        assert record['reruns'] == 0
        assert record['task']['priority'] == 5
        assert record['task']['payload'] == {}
        assert record['task']['tags'] == {}

    def test_keeps_given_values(self):
        graph = create_graph(
            {
                'routing': 'route.',
                'tasks': {'build': {'reruns': 3, 'task': {'retries': 5, 'metadata': {'name': 'build'}}}},
            }
        )

        assert graph['routing'] == 'route.'
        assert graph['tasks']['build']['reruns'] == 3
        assert graph['tasks']['build']['task']['retries'] == 5
        assert graph['tasks']['build']['task']['metadata']['name'] == 'build'
        assert graph['tasks']['build']['task']['metadata']['owner'] == ''

    def test_does_not_modify_input(self):
        graph = {'tasks': {'build': {'task': {'payload': {'env': {}}}}}}
        result = create_graph(graph)

        result['tasks']['build']['task']['payload']['env']['CI'] = True
        assert graph == {'tasks': {'build': {'task': {'payload': {'env': {}}}}}}

    @pytest.mark.parametrize('graph', [{}, {'tasks': []}, None, {'tasks': {'build': {}}}])
    def test_invalid_graph(self, graph):
        with pytest.raises(ValidationError):
            create_graph(graph)
