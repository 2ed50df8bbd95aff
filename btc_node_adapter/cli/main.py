"""Command-line interface for the Bitcoin node adapter."""

import sys
import json
from typing import Optional
import click
import structlog

from btc_node_adapter.models.config import AdapterConfig
from btc_node_adapter.models.blockchain import BlockHash, BlockHeight
from btc_node_adapter.core.adapter import BitcoinAdapter
from btc_node_adapter.core.exceptions import NodeAdapterError
from btc_node_adapter.utils.logging import setup_logging

logger = structlog.get_logger(__name__)


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def _build_adapter(ctx) -> BitcoinAdapter:
    try:
        return BitcoinAdapter(ctx.obj['config'])
    except NodeAdapterError as e:
        click.echo(f"Error connecting to node: {e}", err=True)
        sys.exit(1)


@click.group()
@click.option('--config-file', '-c', type=click.Path(exists=True),
              help='Path to configuration file')
@click.option('--log-level', '-l', default='INFO',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Logging level')
@click.pass_context
def cli(ctx, config_file: Optional[str], log_level: str):
    """Bitcoin node adapter CLI."""
    ctx.ensure_object(dict)

    try:
        if config_file:
            config = AdapterConfig(_env_file=config_file, log_level=log_level)
        else:
            config = AdapterConfig(log_level=log_level)
    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    setup_logging(config)
    ctx.obj['config'] = config


@cli.command()
@click.pass_context
def height(ctx):
    """Print the current chain height."""
    adapter = _build_adapter(ctx)
    try:
        _echo_json({'height': adapter.get_height()})
    except NodeAdapterError as e:
        click.echo(f"Height lookup failed: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('identifier')
@click.option('--by-hash', 'mode', flag_value='hash', help='Treat IDENTIFIER as a block hash')
@click.option('--by-height', 'mode', flag_value='height', help='Treat IDENTIFIER as a block height')
@click.pass_context
def block(ctx, identifier: str, mode: Optional[str]):
    """Print the canonical block for IDENTIFIER."""
    if mode == 'height':
        try:
            target = BlockHeight(int(identifier))
        except ValueError:
            click.echo(f"Invalid block height: {identifier}", err=True)
            sys.exit(1)
    elif mode == 'hash':
        target = BlockHash(identifier)
    else:
        target = identifier

    adapter = _build_adapter(ctx)
    try:
        _echo_json(adapter.get_block(target).to_dict())
    except NodeAdapterError as e:
        click.echo(f"Block fetch failed: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.pass_context
def fee(ctx):
    """Print the estimated fee rate (BTC/kvB)."""
    adapter = _build_adapter(ctx)
    try:
        _echo_json({'fee_rate': str(adapter.estimate_fee())})
    except NodeAdapterError as e:
        click.echo(f"Fee estimation failed: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('tx_hash')
@click.pass_context
def confirmations(ctx, tx_hash: str):
    """Print the confirmation count of TX_HASH."""
    adapter = _build_adapter(ctx)
    try:
        _echo_json({'tx_hash': tx_hash, 'confirmations': adapter.get_confirmations(tx_hash)})
    except NodeAdapterError as e:
        click.echo(f"Confirmation lookup failed: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('raw_hex')
@click.pass_context
def broadcast(ctx, raw_hex: str):
    """Broadcast the signed transaction RAW_HEX."""
    adapter = _build_adapter(ctx)
    try:
        _echo_json({'tx_hash': adapter.send_raw_transaction(raw_hex)})
    except NodeAdapterError as e:
        logger.error("Broadcast failed", **e.to_dict())
        click.echo(f"Broadcast failed: {e}", err=True)
        sys.exit(1)


@cli.command()
def version():
    """Show version information."""
    from btc_node_adapter import __version__, __description__

    click.echo(f"Bitcoin Node Adapter v{__version__}")
    click.echo(__description__)


if __name__ == '__main__':
    cli()
