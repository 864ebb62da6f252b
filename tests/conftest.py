import random

import pytest
from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from nethermind.govaudit.cache import JsonFileCache
from nethermind.govaudit.types import Call


@pytest.fixture(name="random_address")
def fixture_random_address():
    def _generate_random_address():
        return to_checksum_address(random.randbytes(20).hex())

    return _generate_random_address


@pytest.fixture(name="encode_call")
def fixture_encode_call():
    def _encode_call(signature: str, types: list[str], args: list) -> str:
        return "0x" + (function_signature_to_4byte_selector(signature) + encode(types, args)).hex()

    return _encode_call


@pytest.fixture(name="file_cache")
def fixture_file_cache(tmp_path) -> JsonFileCache:
    return JsonFileCache(tmp_path / "cache")


@pytest.fixture(name="make_call")
def fixture_make_call():
    def _make_call(from_address: str, to_address: str, calldata: str = "0x", calls: list[Call] | None = None, **kwargs):
        return Call(from_address=from_address, to_address=to_address, input=calldata, calls=calls or [], **kwargs)

    return _make_call
