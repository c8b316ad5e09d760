#!/usr/bin/env python3

import click

from dslm import __version__
from dslm.config import configure_logging, load_config
from dslm.commands.catalog import cores_handler, dists_handler, profiles_handler, latest_handler
from dslm.commands.site import (
    info_handler,
    switch_core_handler,
    switch_dist_handler,
    link_profile_handler,
    new_handler,
)
from dslm.commands.config import config_cmd


@click.group()
@click.version_option(version=__version__, prog_name='dslm')
@click.option('--base', envvar='DSLM_BASE', type=click.Path(),
              help='Repository root holding cores/ and dists/ (default: $DSLM_BASE or general.base)')
@click.option('--no-prompt', is_flag=True, help='Never ask for a version; fail instead')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, base, no_prompt, debug):
    """dslm - Drupal site link manager.

    Keeps installations as symlinks into a shared repository of cores and
    distributions, so switching versions never copies files.
    """
    config = load_config()
    configure_logging(config, debug=debug)

    ctx.ensure_object(dict)
    ctx.obj['config'] = config
    ctx.obj['base'] = base or config.get('general', {}).get('base')
    ctx.obj['prompt'] = not no_prompt


# Catalog commands
cli.add_command(cores_handler)
cli.add_command(dists_handler)
cli.add_command(profiles_handler)
cli.add_command(latest_handler)

# Site commands
cli.add_command(info_handler)
cli.add_command(switch_core_handler)
cli.add_command(switch_dist_handler)
cli.add_command(link_profile_handler)
cli.add_command(new_handler)

cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
