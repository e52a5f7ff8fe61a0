"""
Environment configuration for the randomness consumer.

Values are read once at import time, after loading a local .env file.
"""
import os

from dotenv import load_dotenv

load_dotenv()


def _get_bool(key: str, default: bool = False) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


CHAIN_ID = int(os.getenv("CHAIN_ID", 943))
RPC_URL = os.getenv("RPC_URL")
INDEXER_URL = os.getenv("INDEXER_URL")
RANDOM_CONTRACT_ADDRESS = os.getenv("RANDOM_CONTRACT_ADDRESS")
CONSUMER_PRIVATE_KEY = os.getenv("CONSUMER_PRIVATE_KEY")
RANDOMNESS_CONFIG_PATH = os.getenv("RANDOMNESS_CONFIG_PATH", "randomness.json")

# Scheduling
CONSUME_INTERVAL_MS = int(os.getenv("CONSUME_INTERVAL_MS", 60_000 * 10))
DETECT_INTERVAL_MS = int(os.getenv("DETECT_INTERVAL_MS", 10_000))

# Stop a detection pass at the first start seen twice instead of skipping it
HALT_ON_REPEATED_START = _get_bool("HALT_ON_REPEATED_START", False)

# "left": random byte is the least significant byte of the threshold, "right": leading byte
THRESHOLD_PADDING = os.getenv("THRESHOLD_PADDING", "left")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
