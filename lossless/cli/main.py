"""
Lossless CLI - Command Line Interface for the lossless auction

Main entry point for all CLI commands.
"""

import logging

import click
from pydantic import ValidationError

from lossless.core.config import load_config
from lossless.utils.logger import setup_logging, get_logger
from lossless.utils.units import format_ether, parse_ether

logger = get_logger("cli")


def parse_ether_option(ctx, param, value):
    """click callback turning an ether string into wei."""
    try:
        return parse_ether(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--env-file", default=None, type=click.Path(dir_okay=False), help="Load settings from a .env file")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, env_file):
    """Lossless Auction - outbid bidders are refunded with a 10% bonus"""
    try:
        config = load_config(env_file)
    except ValidationError as e:
        raise click.UsageError(f"Invalid configuration: {e}")

    level = logging.DEBUG if debug else config.log_level_value
    setup_logging(
        level=level,
        log_dir=str(config.log_dir) if config.log_dir else None,
        log_to_file=config.log_to_file,
    )

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# =============================================================================
# Demo Command
# =============================================================================


@cli.command("demo")
@click.option("--duration", default=None, type=int, help="Auction duration in seconds")
@click.option("--bid1", default="0.001", callback=parse_ether_option, help="First bid (ETH)")
@click.option("--bid2", default="0.002", callback=parse_ether_option, help="Outbidding bid (ETH)")
@click.pass_context
def demo(ctx, duration, bid1, bid2):
    """Run a full auction: bids, refund, pause, finalize, withdraw"""
    from lossless.core.auction import Auction, AuctionError
    from lossless.core.clock import ManualClock
    from lossless.core.state import AccountBook
    from lossless.crypto import generate_keypair

    config = ctx.obj["config"]
    duration = duration if duration is not None else config.duration_seconds
    starting_balance = parse_ether(config.demo_balance_ether)

    click.echo("=" * 60)
    click.echo("  LOSSLESS AUCTION - DEMO")
    click.echo("=" * 60)
    click.echo()

    # Setup
    click.echo("📦 Initializing accounts...")
    owner, bidder1, bidder2 = (generate_keypair() for _ in range(3))
    accounts = AccountBook()
    for kp in (owner, bidder1, bidder2):
        accounts.fund(kp.address, starting_balance)
    clock = ManualClock()

    click.echo(f"  Owner:    {owner.address_hex}")
    click.echo(f"  Bidder 1: {bidder1.address_hex}")
    click.echo(f"  Bidder 2: {bidder2.address_hex}")
    click.echo(f"  Each funded with {format_ether(starting_balance)} ETH")
    click.echo()

    try:
        auction = Auction(owner.address, duration, accounts, clock=clock)
    except AuctionError as e:
        click.echo(f"❌ Deployment failed: {e}")
        ctx.exit(1)

    def show_status():
        status = auction.status()
        click.echo("  Auction Status:")
        click.echo(f"    End Time: {status.end_time}")
        click.echo(f"    Time Remaining: {status.time_remaining} seconds")
        click.echo(f"    Is Ended: {status.ended}")
        click.echo(f"    Is Paused: {status.paused}")
        winner = auction.highest_bidder.hex() if auction.highest_bidder else "none"
        click.echo(f"    Highest Bidder: {winner}")
        click.echo(f"    Highest Bid: {format_ether(auction.highest_bid)} ETH")
        click.echo()

    click.echo(f"🏛️  Auction deployed, custody account 0x{auction.custody_address.hex()}")
    show_status()

    try:
        click.echo("💰 Bidder 1 places a bid...")
        auction.place_bid(bidder1.address, bid1)
        click.echo(f"  ✓ Bid of {format_ether(bid1)} ETH placed")
        show_status()

        click.echo("💰 Bidder 2 outbids...")
        before = accounts.balance_of(bidder1.address)
        auction.place_bid(bidder2.address, bid2)
        refund = accounts.balance_of(bidder1.address) - before
        click.echo(f"  ✓ Bid of {format_ether(bid2)} ETH placed")
        click.echo(f"  ✓ Bidder 1 refunded {format_ether(refund)} ETH (deposit + 10% bonus)")
        show_status()
    except AuctionError as e:
        click.echo(f"❌ Bid failed: {e}")
        ctx.exit(1)

    click.echo("⏸️  Owner pauses the auction...")
    auction.set_paused(owner.address, True)
    try:
        auction.place_bid(bidder1.address, bid2 + bid1)
    except AuctionError as e:
        click.echo(f"  ✓ Bid failed as expected: {e}")
    auction.set_paused(owner.address, False)
    click.echo("  ✓ Owner resumed the auction")
    click.echo()

    click.echo(f"⏩ Fast-forwarding {duration + 1} seconds...")
    clock.advance(duration + 1)
    auction.finalize()
    click.echo("  ✓ Auction finalized")
    show_status()

    click.echo("🏦 Owner withdraws...")
    paid = auction.withdraw(owner.address)
    click.echo(f"  ✓ Withdrew {format_ether(paid)} ETH")
    click.echo()

    click.echo("📊 Final Balances:")
    click.echo(f"  Custody:  {format_ether(auction.custody_balance)} ETH")
    click.echo(f"  Owner:    {format_ether(accounts.balance_of(owner.address))} ETH")
    click.echo(f"  Bidder 1: {format_ether(accounts.balance_of(bidder1.address))} ETH")
    click.echo(f"  Bidder 2: {format_ether(accounts.balance_of(bidder2.address))} ETH")
    click.echo()
    click.echo("✅ Demo complete!")


# =============================================================================
# Utility Commands
# =============================================================================


@cli.command("quote-refund")
@click.argument("previous", callback=parse_ether_option)
@click.argument("new", callback=parse_ether_option)
def quote_refund(previous, new):
    """Refund paid to a PREVIOUS deposit displaced by a NEW bid (ETH)"""
    from lossless.core.auction import refund_for

    if new <= previous:
        click.echo(f"❌ A bid of {format_ether(new)} ETH would be rejected (BidTooLow)")
        return

    refund = refund_for(previous, new)
    click.echo(f"Refund: {format_ether(refund)} ETH")
    click.echo(f"  Deposit: {format_ether(previous)} ETH")
    click.echo(f"  Bonus:   {format_ether(refund - previous)} ETH")


@cli.command("keygen")
def keygen():
    """Generate a bidder identity"""
    from lossless.crypto import generate_keypair

    kp = generate_keypair()
    click.echo(f"Address: {kp.address_hex}")
    click.echo(f"Public key: 0x{kp.public_key.hex()}")


if __name__ == "__main__":
    cli()
