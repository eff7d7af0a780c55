import logging
import sys
from dataclasses import asdict
from urllib.parse import parse_qsl, urlparse

import click

from sharedkey.auth import Authenticator
from sharedkey.config import (DEFAULT_API_VERSION, DEFAULT_TIMEOUT, account_from_config,
                              load_config, parse_connection_string)
from sharedkey.container import ContainerManager
from sharedkey.printer import format_output
from sharedkey.queue import QueueManager
from sharedkey.utils import InvalidCredentialError, SharedKeySigner, SigningRequest


def _result_output(result, fmt):
    data = asdict(result)
    if fmt == 'table':
        data.pop('body')
    format_output(data, fmt)


@click.group(context_settings=dict(help_option_names=['--help']))
@click.option('--profile', help='Profile name from .config.yaml')
@click.option('--config', 'config_path', default='.config.yaml',
              help='Path to configuration file')
@click.option('--connection-string', envvar='STORAGE_CONNECTION_STRING',
              help='Storage connection string, e.g. UseDevelopmentStorage=true')
@click.option('--api-version', help='x-ms-version to send')
@click.option('--format', 'outfmt', default='json',
              type=click.Choice(['json', 'yaml', 'table']))
@click.option('--verbose', is_flag=True, help='Log string to sign and responses')
@click.pass_context
def cli(ctx, profile, config_path, connection_string, api_version, outfmt, verbose):
    """Send hand-signed Shared Key requests to blob and queue storage."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    conf = {}
    try:
        if connection_string:
            account = parse_connection_string(connection_string)
        elif profile:
            conf = load_config(profile, config_path)
            account = account_from_config(conf)
        else:
            click.echo("Either --profile or --connection-string is required", err=True)
            sys.exit(1)
    except (OSError, ValueError) as e:
        # InvalidCredentialError is a ValueError
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

    auth = Authenticator(account,
                         api_version=api_version or conf.get('api_version', DEFAULT_API_VERSION))
    timeout = conf.get('timeout', DEFAULT_TIMEOUT)
    verify = conf.get('verify', True)

    ctx.obj = {
        'account': account,
        'auth': auth,
        'outfmt': outfmt,
        'container_mgr': ContainerManager(auth, timeout=timeout, verify=verify),
        'queue_mgr': QueueManager(auth, timeout=timeout, verify=verify),
    }


@cli.command('sign')
@click.argument('method')
@click.argument('url')
@click.option('-H', '--header', 'headers', multiple=True,
              help='Header as "name:value", repeatable')
@click.option('--content-length', default='',
              help='Content-Length to sign when no Content-Length header is given')
@click.pass_context
def sign_cmd(ctx, method, url, headers, content_length):
    """Print the string to sign and Authorization value for a request."""
    account = ctx.obj['account']
    hdrs = {}
    for h in headers:
        name, sep, value = h.partition(':')
        if not sep:
            raise click.BadParameter(f"header '{h}' is not name:value", param_hint='--header')
        hdrs[name] = value.lstrip()

    query = dict(parse_qsl(urlparse(url).query, keep_blank_values=True))
    request = SigningRequest.from_url(method.upper(), url, hdrs)
    try:
        signature = SharedKeySigner.sign(request, account.name, account.key, query, content_length)
    except InvalidCredentialError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    format_output({
        'string_to_sign': SharedKeySigner.string_to_sign(request, account.name, query,
                                                         content_length),
        'authorization': SharedKeySigner.authorization(account.name, signature),
    }, ctx.obj['outfmt'])


@cli.group()
@click.pass_context
def container(ctx):
    """Blob container probes."""
    pass


@container.command('get-properties')
@click.argument('name')
@click.pass_context
def container_get_properties_cmd(ctx, name):
    """Get Container Properties."""
    result = ctx.obj['container_mgr'].get_properties(name)
    _result_output(result, ctx.obj['outfmt'])


@container.command('acquire-lease')
@click.argument('name')
@click.option('--duration', default=60, type=int, help='Lease duration in seconds')
@click.option('--lease-id', help='Proposed lease id')
@click.pass_context
def container_acquire_lease_cmd(ctx, name, duration, lease_id):
    """Acquire a lease on a container."""
    result = ctx.obj['container_mgr'].acquire_lease(name, duration=duration,
                                                    proposed_lease_id=lease_id)
    _result_output(result, ctx.obj['outfmt'])


@cli.group()
@click.pass_context
def queue(ctx):
    """Queue probes."""
    pass


@queue.command('update-message')
@click.argument('queue_name')
@click.argument('message_id')
@click.argument('pop_receipt')
@click.option('--visibility-timeout', default=60, type=int)
@click.pass_context
def queue_update_message_cmd(ctx, queue_name, message_id, pop_receipt, visibility_timeout):
    """Update a message's visibility using a pop receipt."""
    result = ctx.obj['queue_mgr'].update_message(queue_name, message_id, pop_receipt,
                                                 visibility_timeout=visibility_timeout)
    _result_output(result, ctx.obj['outfmt'])


if __name__ == '__main__':
    cli()
