import pytest
from eth_utils import to_checksum_address

from nethermind.govaudit.decoding import FunctionDecoder
from nethermind.govaudit.narration import CalldataNarrator
from tests.utils import FakeExplorer, FakeSignatureClient, FakeTokenProvider

TIMELOCK = to_checksum_address("0x1a9c8182c09f50c8318d769245bea52c32be35bc")
GOVERNOR = to_checksum_address("0x408ed6354d4973f66138c91495f2f2fcbd8724c3")


@pytest.fixture(name="narrator")
def fixture_narrator() -> CalldataNarrator:
    return CalldataNarrator(
        decoder=FunctionDecoder.from_clients(FakeExplorer(), FakeSignatureClient()),
        tokens=FakeTokenProvider(),
    )


@pytest.fixture(name="simulation_json")
def fixture_simulation_json():
    def _simulation_json(calls: list[dict], contracts: list[dict] | None = None, root_balances: dict | None = None):
        return {
            "transaction": {
                "block_number": 19000000,
                "transaction_info": {
                    "call_trace": {
                        "from": GOVERNOR,
                        "to": TIMELOCK,
                        "input": "0xfe0d94c1",
                        "calls": calls,
                        **(root_balances or {}),
                    }
                },
            },
            "contracts": contracts or [],
        }

    return _simulation_json
