"""
Site commands for dslm.

Inspect and rewire installations: info, switch-core, switch-dist,
link-profile and new.
"""

import sys
from pathlib import Path

import click

from ..cli_utils import command_errors, emit, get_repository, prompt_chooser
from ..domain.operation import SwitchResult
from ..domain.version import Bucket
from ..exit_codes import SwitchError, get_exit_code_for_kind
from ..infra.links import first_link_dirname
from ..render import render_site_info, render_switch_result
from ..services.switch_service import SwitchService


def _service(ctx: click.Context) -> SwitchService:
    repository = get_repository(ctx)
    chooser = prompt_chooser if ctx.obj.get('prompt', True) else None
    return SwitchService(repository, config=ctx.obj['config'], chooser=chooser)


def _report(result: SwitchResult, pretty: bool) -> None:
    """Print a switch result and exit non-zero if it aborted."""
    if pretty:
        render_switch_result(result)
    else:
        emit(result.to_dict())
    if not result.success:
        sys.exit(get_exit_code_for_kind(result.error_kind))


@click.command('info')
@click.argument('dest', type=click.Path(), required=False)
@click.option('--pretty', is_flag=True, help='Display as a formatted table')
@click.pass_context
@command_errors
def info_handler(ctx, dest, pretty):
    """Show the core and dist an installation is linked to.

    DEST defaults to the current directory.
    """
    service = _service(ctx)
    info = service.site_info(dest)
    if info is None:
        raise SwitchError(service.last_error())

    if pretty:
        render_site_info(info)
    else:
        emit(info.to_dict())


@click.command('switch-core')
@click.argument('dest', type=click.Path(), required=False)
@click.option('--core', help='Core to switch to, e.g. drupal-7.32 (prompted if omitted)')
@click.option('--latest', 'use_latest', is_flag=True, help='Switch to the latest release core')
@click.option('--force', is_flag=True, help='Accept (and create) a directory that is not an installation yet')
@click.option('--pretty', is_flag=True, help='Human-readable output')
@click.pass_context
@command_errors
def switch_core_handler(ctx, dest, core, use_latest, force, pretty):
    """Switch an installation to another core.

    \b
    Examples:
        dslm switch-core /var/www/site --core drupal-7.32
        dslm switch-core --latest
    """
    service = _service(ctx)
    if use_latest and not core:
        latest = service.repository.latest(Bucket.RELEASE)
        core = latest['core']
    _report(service.switch_core(dest, core, force=force), pretty)


@click.command('switch-dist')
@click.argument('dest', type=click.Path(), required=False)
@click.option('--dist', help='Distribution to switch to, e.g. 7.x-3.9 (prompted if omitted)')
@click.option('--filter', 'major_filter', help='Only offer dists of this major version (e.g. 7 or drupal-7.32)')
@click.option('--force', is_flag=True, help='Accept a directory that is not an installation yet')
@click.option('--pretty', is_flag=True, help='Human-readable output')
@click.pass_context
@command_errors
def switch_dist_handler(ctx, dest, dist, major_filter, force, pretty):
    """Point an installation's sites/all at another distribution.

    Without --filter, the candidates are restricted to the major version
    of the core the installation is linked to.
    """
    service = _service(ctx)
    if not major_filter:
        major_filter = first_link_dirname(dest or Path.cwd())
    _report(service.switch_dist(dest, dist, force=force, major_filter=major_filter), pretty)


@click.command('link-profile')
@click.argument('name')
@click.argument('version', required=False)
@click.option('--dest', type=click.Path(), help='Installation directory (default: current directory)')
@click.option('--relink', is_flag=True, help='Replace an existing link to another version')
@click.option('--force', is_flag=True, help='Accept a directory that is not an installation yet')
@click.option('--pretty', is_flag=True, help='Human-readable output')
@click.pass_context
@command_errors
def link_profile_handler(ctx, name, version, dest, relink, force, pretty):
    """Link installation profile NAME (at VERSION) into profiles/.

    \b
    Examples:
        dslm link-profile openscholar 7.x-3.9 --dest /var/www/site
        dslm link-profile openscholar 7.x-3.10 --relink
    """
    service = _service(ctx)
    _report(service.link_profile(name, version, dest, allow_relink=relink, force=force), pretty)


@click.command('new')
@click.argument('dest', type=click.Path())
@click.option('--core', help='Core to use (prompted if omitted)')
@click.option('--dist', help='Distribution to use (prompted if omitted)')
@click.option('--latest', 'use_latest', is_flag=True, help='Use the latest release core and dist')
@click.option('--force', is_flag=True, help='Proceed even if DEST already exists')
@click.option('--pretty', is_flag=True, help='Human-readable output')
@click.pass_context
@command_errors
def new_handler(ctx, dest, core, dist, use_latest, force, pretty):
    """Create a new installation at DEST."""
    service = _service(ctx)
    if use_latest:
        latest = service.repository.latest(Bucket.RELEASE)
        core = core or latest['core']
        dist = dist or latest['dist']
    _report(service.new_site(dest, core, dist, force=force), pretty)
