import os
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from nethermind.govaudit.exceptions import ConfigurationError


DEFAULT_DUST_THRESHOLD = Decimal("0.0001")
"""
Absolute ETH balance change below which a change is treated as dust (ie gas accounting) and not reported.
Earlier revisions of the balance check used 0.000001, so the threshold is configurable.
"""

DEFAULT_ETHERSCAN_URL = "https://api.etherscan.io/v2/api"
DEFAULT_SIGNATURE_LOOKUP_URL = "https://www.4byte.directory/api/v1/signatures/"

ONE_HOUR = 60 * 60


@dataclass
class AuditConfig:
    """Configuration for a proposal audit run"""

    etherscan_api_key: str | None = None
    etherscan_url: str = DEFAULT_ETHERSCAN_URL
    chain_id: int = 1

    json_rpc: str | None = None
    """ RPC used for querying ERC20 token metadata.  If None, token amounts are reported without decimals """

    signature_lookup_url: str = DEFAULT_SIGNATURE_LOOKUP_URL
    cache_dir: Path = Path("cache")

    dust_threshold: Decimal = DEFAULT_DUST_THRESHOLD
    native_symbol: str = "ETH"

    explorer_request_delay: float = 0.3
    """ Delay inserted before each explorer request.  Etherscan free keys are limited to 5 requests/second """

    explorer_max_retries: int = 3
    explorer_backoff: float = 1.0
    """ Base delay for exponential backoff between explorer retries.  Doubles after each failed attempt """

    proposal_cache_ttl: int = ONE_HOUR

    @classmethod
    def from_env(cls, **overrides) -> "AuditConfig":
        """
        Loads configuration from environment variables.  Keyword arguments that are not None override the
        environment values.
        """
        env_config = {
            "etherscan_api_key": os.environ.get("ETHERSCAN_API_KEY"),
            "etherscan_url": os.environ.get("ETHERSCAN_URL", DEFAULT_ETHERSCAN_URL),
            "chain_id": int(os.environ.get("CHAIN_ID", "1")),
            "json_rpc": os.environ.get("JSON_RPC"),
            "signature_lookup_url": os.environ.get("SIGNATURE_LOOKUP_URL", DEFAULT_SIGNATURE_LOOKUP_URL),
            "cache_dir": Path(os.environ.get("GOVAUDIT_CACHE_DIR", "cache")),
        }
        env_config.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**env_config)

    def require_api_key(self) -> str:
        """
        Returns the Etherscan API key.

        :raises ConfigurationError: if no key is configured
        """
        if not self.etherscan_api_key:
            raise ConfigurationError(
                "Etherscan API key is required for decoding proposal calldata.  Set with '--api-key' option "
                "or 'ETHERSCAN_API_KEY' environment variable"
            )
        return self.etherscan_api_key
