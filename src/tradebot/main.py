"""Entry point for the trading bot's exchange tooling.

Usage:
    python -m tradebot --config config/exchange.yaml markets
    python -m tradebot -c config/exchange.yaml book BTC-USD --depth 5
    python -m tradebot -c config/exchange.yaml --dry-run
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from tradebot.core.config import BotConfig, load_config
from tradebot.domain.errors import ContractError, ExchangeTimeoutError, TradingApiError
from tradebot.exchange.base import TradingApi
from tradebot.exchange.factory import create_adapter

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_TRANSIENT = 2


def setup_logging(level: str, log_file: str | None = None) -> None:
    """Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file to write logs to
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        handlers=handlers,
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="tradebot",
        description="Trading bot exchange adapter tools",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Path to configuration file",
    )

    parser.add_argument(
        "--log-level",
        "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    parser.add_argument(
        "--log-file",
        type=str,
        help="Log file path",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load config and build the adapter without calling the exchange",
    )

    commands = parser.add_subparsers(dest="command")

    commands.add_parser("markets", help="List markets the adapter supports")

    price = commands.add_parser("price", help="Show the last traded price")
    price.add_argument("market", help="Market id, e.g. BTC-USD")

    book = commands.add_parser("book", help="Show the public order book")
    book.add_argument("market", help="Market id, e.g. BTC-USD")
    book.add_argument("--depth", type=int, default=5, help="Levels per side")

    commands.add_parser("balance", help="Show wallet balances")

    orders = commands.add_parser("orders", help="Show your open orders")
    orders.add_argument("market", help="Market id, e.g. BTC-USD")

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> BotConfig:
    """Build configuration from file and command line args.

    Args:
        args: Parsed command line arguments

    Returns:
        Merged configuration
    """
    config = load_config(args.config)

    if args.log_level:
        config.log_level = args.log_level

    if args.log_file:
        config.log_file = args.log_file

    return config


async def run_command(api: TradingApi, args: argparse.Namespace) -> None:
    """Execute one sub-command against the adapter and print the result.

    Args:
        api: Adapter to query
        args: Parsed command line arguments
    """
    if args.command == "markets":
        for market_id in getattr(api, "supported_markets", []):
            print(market_id)

    elif args.command == "price":
        print(await api.get_latest_market_price(args.market))

    elif args.command == "book":
        book = await api.get_market_orders(args.market)
        print(f"{'SIDE':<5} {'PRICE':>14} {'QUANTITY':>14}")
        for order in reversed(book.sell_orders[: args.depth]):
            print(f"{'ask':<5} {order.price:>14} {order.quantity:>14}")
        for order in book.buy_orders[: args.depth]:
            print(f"{'bid':<5} {order.price:>14} {order.quantity:>14}")

    elif args.command == "balance":
        balance = await api.get_balance_info()
        for currency, amount in sorted(balance.available.items()):
            print(f"{currency:<5} available={amount} on_order={balance.on_order_for(currency)}")

    elif args.command == "orders":
        for order in await api.get_your_open_orders(args.market):
            print(
                f"{order.id} {order.order_type.value} {order.quantity}/{order.original_quantity} "
                f"@ {order.price} ({order.creation_date.isoformat()})"
            )


async def main_async(config: BotConfig, args: argparse.Namespace) -> int:
    """Async main entry point.

    Args:
        config: Bot configuration
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    logger = logging.getLogger(__name__)

    try:
        async with create_adapter(config.exchange) as api:
            logger.info(f"Using {api.get_impl_name()}")
            await run_command(api, args)
        return EXIT_OK
    except ExchangeTimeoutError as e:
        logger.warning(f"Exchange unavailable, try again later: {e}")
        return EXIT_TRANSIENT
    except (TradingApiError, ContractError) as e:
        logger.error(f"Fatal error: {e}")
        return EXIT_FATAL


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Build configuration
    try:
        config = build_config(args)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_FATAL

    # Set up logging
    setup_logging(config.log_level, config.log_file)

    logger = logging.getLogger(__name__)
    logger.info(f"Exchange: {config.exchange.name} ({config.exchange.adapter.value})")
    logger.info(f"Markets: {[m.id for m in config.enabled_markets()]}")

    # Dry run - validate config and adapter construction only
    if args.dry_run:
        try:
            api = create_adapter(config.exchange)
        except ContractError as e:
            logger.error(f"Invalid configuration: {e}")
            return EXIT_FATAL
        asyncio.run(api.aclose())
        logger.info("Dry run - configuration valid")
        return EXIT_OK

    if args.command is None:
        logger.error("No command given. Use --help to list commands.")
        return EXIT_FATAL

    return asyncio.run(main_async(config, args))


if __name__ == "__main__":
    sys.exit(main())
