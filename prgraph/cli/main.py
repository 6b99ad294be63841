# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
prgraph CLI - Main entry point

Usage:
    prgraph decorate owner/repo 42      - Print the decorated task graph for a pull request
    prgraph config                      - Show the decoration configuration
"""

import json
import re
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from prgraph import __version__
from prgraph.classes import DecorationConfig, PullRequest
from prgraph.constants import (
    GITHUB_TOKEN_ENV,
    PROVISIONER_ID_ENV,
    ROUTING_KEY_ENV,
    WORKER_TYPE_ENV,
)
from prgraph.errors import PRGraphError
from prgraph.graph import decorate_graph, fetch_graph
from prgraph.utils.github_api_tools import GitHubApiError, GitHubClient

REPO_PATTERN = re.compile(r'^[a-zA-Z0-9._-]+/[a-zA-Z0-9._-]+$')

console = Console()
err_console = Console(stderr=True)


def validate_repo_format(repo: str) -> str:
    """Validate owner/repo format. Raises click.BadParameter on failure."""
    repo = repo.strip()
    if not REPO_PATTERN.match(repo):
        raise click.BadParameter(
            f"Repository must be in owner/repo format with alphanumeric characters, "
            f"hyphens, underscores, or dots (got '{repo}')",
            param_hint='REPOSITORY',
        )
    return repo


@click.group()
@click.version_option(version=__version__, prog_name='prgraph')
def cli():
    """prgraph - Build decorated task graphs from GitHub pull requests"""
    pass


@cli.command('decorate')
@click.argument('repository', type=str)
@click.argument('number', type=click.IntRange(min=1))
@click.option('--token', envvar=GITHUB_TOKEN_ENV, default=None, help=f'GitHub token (default: ${GITHUB_TOKEN_ENV})')
@click.option(
    '--output',
    '-o',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Write the graph to this file instead of stdout',
)
@click.pass_context
def decorate(ctx, repository: str, number: int, token: Optional[str], output: Optional[Path]):
    """Fetch taskgraph.json for a pull request and decorate it.

    \b
    Arguments:
        REPOSITORY: Base repository in owner/repo format
        NUMBER: Pull request number

    \b
    Examples:
        prgraph decorate mozilla/gaia 42
        prgraph decorate mozilla/gaia 42 -o graph.json
    """
    repository = validate_repo_format(repository)
    github = GitHubClient(token=token)

    try:
        pull_request = PullRequest.from_github_response(github.get_pull_request(repository, number))
        graph = fetch_graph(github, pull_request)
        decorated = decorate_graph(graph, github, pull_request, DecorationConfig.from_env())
    except GitHubApiError as e:
        err_console.print(f'[red]Error: could not fetch PR #{number} from {repository}: {e}[/red]')
        ctx.exit(1)
    except PRGraphError as e:
        err_console.print(f'[red]Error: {e}[/red]')
        ctx.exit(1)

    rendered = json.dumps(decorated, indent=2, sort_keys=True)
    if output is None:
        click.echo(rendered)
        return

    output.write_text(rendered + '\n')
    err_console.print(f'[green]Wrote {len(decorated["tasks"])} task(s) to {output}[/green]')


@cli.command('config')
def show_config():
    """Show the decoration configuration resolved from the environment."""
    config = DecorationConfig.from_env()

    table = Table(show_header=True, title='prgraph decoration configuration')
    table.add_column('Setting', style='cyan')
    table.add_column('Environment', style='dim')
    table.add_column('Value', style='green')

    table.add_row('provisionerId', PROVISIONER_ID_ENV, config.provisioner_id)
    table.add_row('workerType', WORKER_TYPE_ENV, config.worker_type)
    table.add_row('routing', ROUTING_KEY_ENV, config.routing)

    console.print(table)


def main():
    """Main entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
