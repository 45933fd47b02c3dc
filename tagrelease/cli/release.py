"""Release command implementation."""

import sys

import click

from ..config import DEFAULTS, merge
from ..errors import ReleaseNotesError
from ..releasenote import ABUSE_LIMIT_BATCH_SIZE, generate, publish


@click.command()
@click.option('--tag', '-t', required=True, help='Tag to release')
@click.option('--prev-tag', '-s', required=True, help='Previous tag, the changelog starts after it')
@click.option('--title', help='Release title (default: the tag name)')
@click.option('--owner', help='Repository owner or GitLab namespace')
@click.option('--repo', help='Repository name')
@click.option('--draft/--no-draft', default=None, help='Publish as a draft release (default: draft)')
@click.option('--prerelease/--no-prerelease', default=None, help='Mark the release as a pre-release')
@click.option('--header', help='Text placed above the sections')
@click.option('--footer', help='Text placed below the sections')
@click.option('--batch-size', type=click.IntRange(min=1), default=ABUSE_LIMIT_BATCH_SIZE,
              show_default=True, help='Maximum concurrent change request lookups')
@click.option('--dry-run', is_flag=True, help='Show the release notes without publishing')
@click.option('--output', '-o', help='Write the release notes to a file instead of publishing')
@click.pass_context
def release(ctx, tag, prev_tag, title, owner, repo, draft, prerelease, header, footer,
            batch_size, dry_run, output):
    """Create a release with a changelog of the changes since PREV_TAG."""

    # Import here to avoid circular dependency
    from .main import create_client, default_repository

    logger = ctx.obj['logger']

    env_owner, env_repo = default_repository()
    overrides = {
        'title': title,
        'owner': owner,
        'repo': repo,
        'draft': draft,
        'prerelease': prerelease,
        'header': header,
        'footer': footer,
    }

    try:
        config = merge(DEFAULTS, ctx.obj['file_values'], overrides)
        config_owner = config.owner or env_owner
        config_repo = config.repo or env_repo
        client = create_client(ctx, config_owner, config_repo)

        logger.info(f"Creating release for {config_owner}/{config_repo}, tag: {tag}, previous tag: {prev_tag}")
        notes = generate(client, tag, prev_tag, config, batch_size)

        if output:
            with open(output, 'w', encoding='utf-8') as f:
                f.write(notes.body)
            click.echo(f"Release notes saved to: {output}")
            return

        click.echo(f"Generated release notes for {tag}: {notes.title}")
        click.echo("=" * 50)
        click.echo(notes.body)
        click.echo("=" * 50)

        if dry_run:
            click.echo("(Dry run - no changes made)")
            return

        publish(client, tag, notes, config)
        click.echo(f"Successfully created release for tag: {tag}")

    except (ReleaseNotesError, OSError) as e:
        logger.error(f"Release failed: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
