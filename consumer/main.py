"""
Main entry point for the randomness consumer.

Runs two strategies on independent timers:
- consume_randomness: opens heats from unclaimed preimages
- detect_secrets: casts starts whose secrets are all revealed
"""
import argparse
import asyncio
import logging
import sys

from web3 import AsyncHTTPProvider, AsyncWeb3

from consumer.config import load_randomness_config
from consumer.scheduler import Scheduler
from consumer.services.chain import ChainClient
from consumer.services.fees import FeeEstimator
from consumer.services.indexer import IndexerClient
from consumer.strategies.aggregator import RevealAggregator
from consumer.strategies.selector import LocationSelector
from consumer.utils.env import (
    CHAIN_ID,
    RPC_URL,
    INDEXER_URL,
    RANDOM_CONTRACT_ADDRESS,
    CONSUMER_PRIVATE_KEY,
    RANDOMNESS_CONFIG_PATH,
    CONSUME_INTERVAL_MS,
    DETECT_INTERVAL_MS,
    HALT_ON_REPEATED_START,
    THRESHOLD_PADDING,
    LOG_LEVEL,
)
from consumer.utils.contracts import make_contract

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.FileHandler("consumer.log"), logging.StreamHandler(sys.stdout)],
    )


def validate_config(config: dict) -> None:
    """Raise ValueError listing every missing required setting."""
    required = {
        "rpc_url": "RPC_URL",
        "indexer_url": "INDEXER_URL",
        "random_contract_address": "RANDOM_CONTRACT_ADDRESS",
        "consumer_private_key": "CONSUMER_PRIVATE_KEY",
    }
    missing = [env for key, env in required.items() if not config.get(key)]
    if missing:
        raise ValueError(f"Missing required settings: {', '.join(missing)}")
    padding = config.get("threshold_padding", "left")
    if padding not in ("left", "right"):
        raise ValueError(f"THRESHOLD_PADDING must be 'left' or 'right', got {padding!r}")


def get_config(argv=None) -> dict:
    """Load configuration from environment and arguments."""
    parser = argparse.ArgumentParser(description="Randomness consumer")
    parser.add_argument(
        "--config",
        type=str,
        default=RANDOMNESS_CONFIG_PATH,
        help="Path to the randomness streams JSON file",
    )
    args = parser.parse_args(argv)

    config = {
        "chain_id": CHAIN_ID,
        "rpc_url": RPC_URL,
        "indexer_url": INDEXER_URL,
        "random_contract_address": RANDOM_CONTRACT_ADDRESS,
        "consumer_private_key": CONSUMER_PRIVATE_KEY,
        "randomness_config_path": args.config,
        "consume_interval_ms": CONSUME_INTERVAL_MS,
        "detect_interval_ms": DETECT_INTERVAL_MS,
        "halt_on_repeated_start": HALT_ON_REPEATED_START,
        "threshold_padding": THRESHOLD_PADDING,
    }
    validate_config(config)
    return config


def build_scheduler(config: dict, indexer: IndexerClient) -> Scheduler:
    """Wire the strategies to their collaborators and register their timers."""
    randomness = load_randomness_config(
        config["randomness_config_path"], config["chain_id"]
    )

    w3 = AsyncWeb3(AsyncHTTPProvider(config["rpc_url"]))
    chain_client = ChainClient.from_private_key(
        w3, config["consumer_private_key"], chain_id=config["chain_id"]
    )
    contract = make_contract(w3, "Random", config["random_contract_address"])
    fee_estimator = FeeEstimator(chain_client)

    selector = LocationSelector(
        config=randomness,
        indexer=indexer,
        chain_client=chain_client,
        contract=contract,
        fee_estimator=fee_estimator,
        threshold_padding=config.get("threshold_padding", "left"),
    )
    aggregator = RevealAggregator(
        indexer=indexer,
        chain_client=chain_client,
        contract=contract,
        fee_estimator=fee_estimator,
        halt_on_repeat=config["halt_on_repeated_start"],
    )

    logger.info(f"Consumer: {chain_client.address}")
    logger.info(f"Chain: {config['chain_id']}")
    logger.info(f"Random contract: {contract.address}")

    scheduler = Scheduler()
    scheduler.register(
        "consume_randomness", selector.consume_randomness, config["consume_interval_ms"]
    )
    scheduler.register(
        "detect_secrets", aggregator.detect_secrets, config["detect_interval_ms"]
    )
    return scheduler


async def run_consumer(config: dict) -> None:
    logger.info("=" * 80)
    logger.info("STARTING RANDOMNESS CONSUMER")
    logger.info("=" * 80)

    indexer = IndexerClient(config["indexer_url"])
    scheduler = build_scheduler(config, indexer)
    try:
        await scheduler.run()
    finally:
        await scheduler.stop()
        await indexer.close()
        logger.info("Indexer client closed")


def main():
    """Consumer entry point."""
    configure_logging()
    try:
        config = get_config()
        asyncio.run(run_consumer(config))
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received. Shutting down consumer...")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
