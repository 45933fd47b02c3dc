"""Main CLI entry point for Tagrelease."""

import logging
import os
import sys
from datetime import datetime

import click

from .. import __version__
from ..config import (
    PLATFORM_GITHUB, PLATFORM_GITLAB, Settings, create_sample_config,
    find_config_file, get_settings, load_config_module,
)
from ..errors import ConfigError
from ..github import GitHubClient
from ..gitlab import GitLabClient
from .release import release


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--platform', type=click.Choice([PLATFORM_GITHUB, PLATFORM_GITLAB]),
              help='Hosting platform (default: github)')
@click.option('--host', help='API host URL (can also be set in the config file)')
@click.option('--token', help='API token (can also be set with TAGRELEASE_TOKEN)')
@click.option('--config-file', '-c', help='Path to JSON or Python configuration module')
@click.version_option(version=__version__, prog_name="tagrelease")
@click.pass_context
def cli(ctx, debug, platform, host, token, config_file):
    """Tagrelease - grouped changelog releases between two tags."""

    # Setup logging
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    ctx.ensure_object(dict)
    ctx.obj['logger'] = logging.getLogger('tagrelease')

    # Subcommands that do not talk to a platform need no configuration
    if ctx.invoked_subcommand in ('init-config', 'version'):
        return

    config_path = config_file or find_config_file()
    try:
        file_values = load_config_module(config_path) if config_path else {}
        base_settings = get_settings(file_values)
    except (ConfigError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    ctx.obj['file_values'] = file_values
    overrides = {k: v for k, v in {'platform': platform, 'host': host, 'token': token}.items() if v is not None}
    ctx.obj['settings'] = Settings(**{**base_settings.model_dump(), **overrides})


def default_repository():
    """Owner and repository from GITHUB_REPOSITORY, as set on Actions runners."""
    value = os.getenv('GITHUB_REPOSITORY', '')
    if value.count('/') == 1:
        owner, repo = value.split('/')
        return owner, repo
    return None, None


def create_client(ctx, owner, repo):
    """Create the platform client for a repository."""
    settings = ctx.obj['settings']
    logger = ctx.obj['logger']

    if not settings.token:
        click.echo("Error: API token is required. Set TAGRELEASE_TOKEN, use --token, or config file", err=True)
        sys.exit(1)

    if not owner or not repo:
        click.echo("Error: Repository is required. Use --owner/--repo or config file", err=True)
        sys.exit(1)

    if settings.platform == PLATFORM_GITLAB:
        return GitLabClient(settings, owner, repo, logger)
    return GitHubClient(settings, owner, repo, logger)


@cli.command()
@click.option('--path', '-p', default='tagrelease.json', help='Path for the config file')
def init_config(path):
    """Create a sample configuration file."""
    try:
        create_sample_config(path)
    except OSError as e:
        click.echo(f"Error creating config file: {e}", err=True)
        sys.exit(1)
    click.echo(f"Sample configuration file created at: {path}")
    click.echo("Please edit the file and set the owner, repository and sections.")


@cli.command()
def version():
    """Show version information."""
    build_date = datetime.now().strftime('%Y-%m-%d')
    click.echo(f"Tagrelease version {__version__} (built {build_date})")


# Add subcommands
cli.add_command(release)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == '__main__':
    main()
