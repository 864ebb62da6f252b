import asyncio
import logging
from typing import Any

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address
from web3 import Web3

from nethermind.govaudit.utils import addresses_match, format_units

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("tokens")

SAI_ADDRESS = "0x89d24A6b4CcB1B6fAA2625fE562bDD9a23260359"


def _metadata_abi(string_type: str) -> list[dict[str, Any]]:
    def _view(name: str, output_type: str) -> dict[str, Any]:
        return {
            "constant": True,
            "inputs": [],
            "name": name,
            "outputs": [{"name": "", "type": output_type}],
            "stateMutability": "view",
            "type": "function",
        }

    return [_view("name", string_type), _view("symbol", string_type), _view("decimals", "uint8")]


ERC20_METADATA_ABI = _metadata_abi("string")
ERC20_BYTES32_METADATA_ABI = _metadata_abi("bytes32")


def _decode_bytes32(value: bytes | str) -> str:
    if isinstance(value, bytes):
        return value.rstrip(b"\x00").decode("utf-8", errors="replace")
    return value


class ERC20Token:
    """
    Class for representing ERC20 Tokens.  Can be initialized from on-chain token, and will query
    token constants from contract.

    Can be used to convert raw token amounts into human-readable amounts.
    """

    name: str
    """
        UTF-8 Name of the token from Token Contract
    """

    symbol: str
    """
        Token Symbol from Contract
    """

    decimals: int
    """
        Number of decimals from Token Contract
    """

    address: ChecksumAddress
    """
        Checksum Address of the Token Contract
    """

    def __init__(self, name: str, symbol: str, decimals: int, address: ChecksumAddress | str) -> None:
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.address = to_checksum_address(address)

    @classmethod
    def get_abi(cls, token_address: str) -> list[dict[str, Any]]:
        """
        Returns the metadata ABI for a token.  SAI returns its name and symbol as bytes32 instead of string.

        :param token_address: hex address of ERC20 token contract
        """
        if addresses_match(token_address, SAI_ADDRESS):
            return ERC20_BYTES32_METADATA_ABI
        return ERC20_METADATA_ABI

    @classmethod
    def from_chain(
        cls,
        w3: Web3,  # pylint: disable=invalid-name
        token_address: ChecksumAddress | str,
    ) -> "ERC20Token":
        """
        Initialize ERC20Token from on-chain token address.  Fetches token name, symbol, and decimals from contract.

        :param w3:
            :class:`~web3.Web3` RPC connection to EVM node
        :param token_address:
            hex address of ERC20 token contract
        :return: :class:`~nethermind.govaudit.tokens.ERC20Token`
        """
        token_address = to_checksum_address(token_address)
        token_contract = w3.eth.contract(token_address, abi=cls.get_abi(token_address))

        return ERC20Token(
            name=_decode_bytes32(token_contract.functions.name().call()),
            symbol=_decode_bytes32(token_contract.functions.symbol().call()),
            decimals=token_contract.functions.decimals().call(),
            address=token_address,
        )

    def convert_decimals(self, raw_token_amount: int) -> str:
        """
        Divides raw token amounts by token decimals without losing precision

        :param int raw_token_amount:
            Raw token amount
        :return:
            Token amount adjusted by decimals, as a decimal string
        """
        return format_units(raw_token_amount, self.decimals)

    def human_readable(self, raw_token_amount: int) -> str:
        """
        Converts raw token amount to human-readable string containing the correct decimals and the token symbol.

        :param raw_token_amount:
            raw token amount
        :return:
            Human-readable string containing token amount and symbol
        """

        return f"{self.convert_decimals(raw_token_amount)} {self.symbol}"


class TokenMetadataProvider:
    """
    Resolves and caches token metadata for the addresses encountered during an audit.  Metadata is read over
    JSON RPC, and lookups that fail or run without an RPC connection return None.
    """

    w3: Web3 | None

    def __init__(self, json_rpc: str | None = None, w3: Web3 | None = None):
        if w3 is None and json_rpc:
            w3 = Web3(Web3.HTTPProvider(json_rpc))
        self.w3 = w3
        self._tokens: dict[str, ERC20Token | None] = {}

    def add_token(self, token: ERC20Token):
        """Registers known token metadata, skipping the RPC lookup for that address"""
        self._tokens[token.address.lower()] = token

    async def get_token(self, token_address: str) -> ERC20Token | None:
        """
        Returns token metadata for an address

        :param token_address: hex address of ERC20 token contract
        :return: ERC20Token, or None if the metadata could not be read
        """
        key = token_address.lower()
        if key in self._tokens:
            return self._tokens[key]

        if self.w3 is None:
            logger.debug(f"No JSON RPC configured, skipping token metadata lookup for {token_address}")
            return None

        try:
            token = await asyncio.to_thread(ERC20Token.from_chain, self.w3, token_address)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning(f"Could not fetch ERC20 metadata for {token_address}: {e}")
            token = None

        self._tokens[key] = token
        return token
