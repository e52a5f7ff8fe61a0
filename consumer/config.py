"""
Randomness stream configuration, keyed by chain id.
"""
import json
import logging
from pathlib import Path
from typing import Union

from protocol.models import RandomnessConfig

logger = logging.getLogger(__name__)


def load_randomness_config(path: Union[str, Path], chain_id: int) -> RandomnessConfig:
    """
    Load the streams configured for `chain_id` from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the chain has no configuration.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Randomness config not found at {path}")

    with open(path, "r") as f:
        data = json.load(f)

    chain_config = data.get(str(chain_id))
    if chain_config is None:
        raise ValueError(f"No randomness config for chain id {chain_id} in {path}")

    config = RandomnessConfig.model_validate(chain_config)
    logger.info(f"Loaded {len(config.streams)} randomness streams for chain {chain_id}")
    return config
