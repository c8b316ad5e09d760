"""
Catalog commands for dslm.

List the cores, dists and profiles a repository holds.
"""

import click

from ..cli_utils import command_errors, emit, get_repository
from ..domain.version import Bucket, PackageKind
from ..render import render_catalog

BUCKET_CHOICES = click.Choice([bucket.value for bucket in Bucket])


def _list_catalog(ctx: click.Context, kind: PackageKind, bucket: str, pretty: bool, name: str = None):
    repository = get_repository(ctx)
    catalog = repository.catalog(kind)
    if name:
        catalog = catalog.filter_name(name)
    entries = catalog.bucket(Bucket(bucket))

    if pretty:
        if kind == PackageKind.PROFILE:
            for profile_name, profile_catalog in catalog.by_name().items():
                render_catalog(profile_catalog, profile_catalog.bucket(Bucket(bucket)), title=profile_name)
            if not entries:
                render_catalog(catalog, entries)
        else:
            render_catalog(catalog, entries, title=f"{kind.value.capitalize()}s ({bucket})")
        return

    for entry in entries:
        emit(entry.to_dict())


@click.command('cores')
@click.option('--bucket', type=BUCKET_CHOICES, default='all', help='Release maturity to list (default: all)')
@click.option('--pretty', is_flag=True, help='Display as a formatted table')
@click.pass_context
@command_errors
def cores_handler(ctx, bucket, pretty):
    """List the cores in the repository, lowest version first.

    \b
    Examples:
        dslm cores
        dslm cores --bucket release --pretty
    """
    _list_catalog(ctx, PackageKind.CORE, bucket, pretty)


@click.command('dists')
@click.option('--bucket', type=BUCKET_CHOICES, default='all', help='Release maturity to list (default: all)')
@click.option('--pretty', is_flag=True, help='Display as a formatted table')
@click.pass_context
@command_errors
def dists_handler(ctx, bucket, pretty):
    """List the distributions in the repository, lowest version first."""
    _list_catalog(ctx, PackageKind.DISTRIBUTION, bucket, pretty)


@click.command('profiles')
@click.option('--name', help='Only list versions of this profile')
@click.option('--bucket', type=BUCKET_CHOICES, default='all', help='Release maturity to list (default: all)')
@click.option('--pretty', is_flag=True, help='Display one table per profile')
@click.pass_context
@command_errors
def profiles_handler(ctx, name, bucket, pretty):
    """List the installation profiles in the repository."""
    _list_catalog(ctx, PackageKind.PROFILE, bucket, pretty, name=name)


@click.command('latest')
@click.option('--bucket', type=BUCKET_CHOICES, default='all', help='Release maturity to consider (default: all)')
@click.pass_context
@command_errors
def latest_handler(ctx, bucket):
    """Show the latest core and dist.

    \b
    Examples:
        dslm latest
        dslm latest --bucket release
    """
    repository = get_repository(ctx)
    emit(repository.latest(Bucket(bucket)))
