import asyncio
import json

from eth_utils import to_checksum_address

from nethermind.govaudit.decoding import FunctionDecoder
from nethermind.govaudit.narration import CalldataNarrator, format_args, format_value
from nethermind.govaudit.narration.narrator import COMPLEX_OBJECT, decode_token_call
from nethermind.govaudit.tokens import ERC20Token
from nethermind.govaudit.types import Call, DecodedArgument
from tests.resources.ABI import TIMELOCK_ABI_JSON
from tests.utils import FakeExplorer, FakeSignatureClient, FakeTokenProvider

TIMELOCK = to_checksum_address("0x1a9c8182c09f50c8318d769245bea52c32be35bc")
USDC = ERC20Token(name="USD Coin", symbol="USDC", decimals=6, address="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48")


def _narrator(abis=None, signatures=None, tokens=None) -> CalldataNarrator:
    return CalldataNarrator(
        decoder=FunctionDecoder.from_clients(FakeExplorer(abis), FakeSignatureClient(signatures)),
        tokens=FakeTokenProvider(tokens),
    )


def test_native_transfer(random_address):
    recipient = random_address()
    call = Call(from_address=TIMELOCK, to_address=recipient, input="0x", value=str(15 * 10**17))

    narration = asyncio.run(_narrator().narrate(call, recipient, f"`{recipient}`"))

    assert narration.text == f"`{TIMELOCK}` transfers 1.5 ETH to `{recipient}` (formatted)"
    assert narration.warnings == []


def test_zero_value_empty_calldata_not_a_transfer(random_address):
    recipient = random_address()
    call = Call(from_address=TIMELOCK, to_address=recipient, input="0x", value="0")

    narration = asyncio.run(_narrator().narrate(call, recipient, f"`{recipient}`"))

    assert "(not decoded)" in narration.text
    assert len(narration.warnings) == 1


def test_token_transfer_round_trip(random_address, encode_call):
    recipient = random_address()
    calldata = encode_call("transfer(address,uint256)", ["address", "uint256"], [recipient, 2_500_000])

    assert decode_token_call(calldata) == (recipient, 2_500_000)

    call = Call(from_address=TIMELOCK, to_address=USDC.address, input=calldata)
    narration = asyncio.run(_narrator(tokens=[USDC]).narrate(call, USDC.address, "USD Coin"))

    assert narration.text == f"`{TIMELOCK}` transfers 2.5 USDC to `{recipient}` on USD Coin (formatted)"


def test_token_approve(random_address, encode_call):
    spender = random_address()
    calldata = encode_call("approve(address,uint256)", ["address", "uint256"], [spender, 10**6])
    call = Call(from_address=TIMELOCK, to_address=USDC.address, input=calldata)

    narration = asyncio.run(_narrator(tokens=[USDC]).narrate(call, USDC.address, "USD Coin"))

    assert narration.text == f"`{TIMELOCK}` approves `{spender}` to spend 1.0 USDC on USD Coin (formatted)"


def test_token_transfer_from(random_address, encode_call):
    owner, recipient = random_address(), random_address()
    calldata = encode_call(
        "transferFrom(address,address,uint256)", ["address", "address", "uint256"], [owner, recipient, 1]
    )
    call = Call(from_address=TIMELOCK, to_address=USDC.address, input=calldata)

    narration = asyncio.run(_narrator(tokens=[USDC]).narrate(call, USDC.address, "USD Coin"))

    assert narration.text == (
        f"`{TIMELOCK}` transfers 0.000001 USDC from `{owner}` to `{recipient}` on USD Coin (formatted)"
    )


def test_delegated_token_call_reads_target_metadata(random_address, encode_call):
    implementation, recipient = random_address(), random_address()
    calldata = encode_call("transfer(address,uint256)", ["address", "uint256"], [recipient, 2_500_000])
    # Implementation frame of a proxied token, issued by the proxy
    call = Call(from_address=USDC.address, to_address=implementation, input=calldata)

    narration = asyncio.run(_narrator(tokens=[USDC]).narrate(call, USDC.address, "USD Coin", sender=TIMELOCK))

    assert narration.text == f"`{TIMELOCK}` transfers 2.5 USDC to `{recipient}` on USD Coin (formatted)"


def test_token_call_without_metadata(random_address, encode_call):
    token = random_address()
    calldata = encode_call("transfer(address,uint256)", ["address", "uint256"], [random_address(), 42])
    call = Call(from_address=TIMELOCK, to_address=token, input=calldata)

    narration = asyncio.run(_narrator().narrate(call, token, f"`{token}`"))

    assert "42 (raw amount, token metadata unavailable)" in narration.text
    assert narration.warnings == []


def test_generic_decoded_call(encode_call):
    target = "0x6d903f6003cca6255D85CcA4D3B5E5146dC33925"
    calldata = encode_call("setDelay(uint256)", ["uint256"], [172800])
    narrator = _narrator(abis={target: json.loads(TIMELOCK_ABI_JSON)})

    call = Call(from_address=TIMELOCK, to_address=target, input=calldata)
    narration = asyncio.run(narrator.narrate(call, target, "Timelock at `0x6d90`"))

    assert narration.text == f"`{TIMELOCK}` calls `setDelay(delay_=172800)` on Timelock at `0x6d90` (decoded from ABI)"

    # Repeat narration is served from the decode cache
    narration = asyncio.run(narrator.narrate(call, target, "Timelock at `0x6d90`"))
    assert narration.text.endswith("(decoded from cache)")


def test_signature_lookup_call(random_address, encode_call):
    target = random_address()
    calldata = encode_call("setPendingAdmin(address)", ["address"], [random_address()])
    narrator = _narrator(signatures={calldata[:10]: ["setPendingAdmin(address)"]})

    narration = asyncio.run(narrator.narrate(Call(TIMELOCK, target, calldata), target, "Timelock"))

    assert narration.text == f"`{TIMELOCK}` calls `setPendingAdmin()` on Timelock (decoded from signature database)"
    assert narration.warnings == []


def test_simulation_decoding_fallback(random_address):
    target = random_address()
    call = Call(
        from_address=TIMELOCK,
        to_address=target,
        input="0xe177246e000000000000000000000000000000000000000000000000000000000002a300",
        function_name="setDelay",
        decoded_input=[DecodedArgument(name="delay_", type="uint256", value="172800")],
    )

    narration = asyncio.run(_narrator().narrate(call, target, "Timelock"))

    assert narration.text == (
        f"`{TIMELOCK}` calls `setDelay(uint256 delay_)` on Timelock with arguments `delay_=172800` "
        "(decoded by simulation)"
    )
    assert narration.warnings == []


def test_not_decoded_warns_once(random_address):
    target = random_address()
    call = Call(from_address=TIMELOCK, to_address=target, input="0x12345678abcd")

    narration = asyncio.run(_narrator().narrate(call, target, f"`{target}`"))

    assert narration.text == f"`{TIMELOCK}` calls `0x12345678` on `{target}` (not decoded)"
    assert narration.warnings == [f"Could not decode function with selector 0x12345678 for contract {target}"]


def test_format_value():
    assert format_value(2**255) == str(2**255)
    assert format_value(b"\xde\xad") == "0xdead"
    assert format_value(True) == "true"
    assert format_value(None) == "undefined"
    assert format_value(("0x1a9C8182C09F50C8318d769245beA52c32BE35BC", 10**30)) == (
        '["0x1a9C8182C09F50C8318d769245beA52c32BE35BC", "1000000000000000000000000000000"]'
    )
    assert format_value({"amount": 5, "data": [b"\x01"]}) == '{"amount": "5", "data": ["0x01"]}'


def test_format_args():
    assert format_args([]) == ""
    assert format_args([1, "0xabc"], ["amount", ""]) == "amount=1, 0xabc"
    assert format_args([1, 2]) == "1, 2"


def test_format_args_placeholder_for_unserializable():
    assert format_args([[object()]], ["items"]) == COMPLEX_OBJECT
