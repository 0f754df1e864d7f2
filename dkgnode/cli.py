"""Command line for running a local Pedersen VSS deal and inspecting the curve setup."""

import logging

import click

from .curve import H, point_to_hex
from .pvss import Node, create_shares, verify_pederson_commitment, verify_share
from .signing import NodeKey

logger = logging.getLogger(__name__)


@click.group()
@click.option("--log-level", default="INFO", show_default=True,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False))
def cli(log_level):
    """DKG node tooling."""
    logging.basicConfig(level=log_level.upper(), format="%(name)s - %(levelname)s - %(message)s")


@cli.command()
@click.option("--nodes", "node_count", default=5, show_default=True, help="Number of participant nodes")
@click.option("--threshold", default=3, show_default=True, help="Shares needed to reconstruct")
@click.option("--secret", default=None, help="Secret to deal, hex. Random when omitted")
def deal(node_count, threshold, secret):
    """Deal a secret to local nodes and verify every share publicly."""
    if threshold < 1 or threshold > node_count:
        raise click.BadParameter("threshold must be between 1 and the number of nodes")
    nodes = [Node(index=i, pub_key=NodeKey.generate().pub) for i in range(1, node_count + 1)]
    secret_value = int(secret, 16) if secret else NodeKey.generate().private

    out = create_shares(nodes, secret_value, threshold)
    click.echo("pubPoly:")
    for c in out.pub_poly:
        click.echo("  %s %s" % point_to_hex(c))

    failures = 0
    for node, share, share_prime in zip(nodes, out.shares, out.shares_prime):
        ok_share = verify_share(share, out.pub_poly, node.index)
        ok_pedersen = verify_pederson_commitment(share, share_prime, out.ci, node.index)
        failures += not (ok_share and ok_pedersen)
        click.echo(f"node {node.index}: share={'ok' if ok_share else 'BAD'} pedersen={'ok' if ok_pedersen else 'BAD'}")
    if failures:
        logger.error("%d shares failed verification", failures)
        raise SystemExit(1)


@cli.command("h-point")
def h_point():
    """Print the second generator H."""
    x, y = point_to_hex(H)
    click.echo(f"{x} {y}")


def main():
    cli()


if __name__ == "__main__":
    main()
