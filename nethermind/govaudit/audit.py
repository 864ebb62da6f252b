import json
import logging
from pathlib import Path
from typing import Any

import aiohttp

from nethermind.govaudit.cache import AbiCache, JsonFileCache
from nethermind.govaudit.checks import (
    CheckReport,
    DecodeCalldataCheck,
    EthBalanceChangesCheck,
    ProposalCheckRunner,
    ProposalContext,
)
from nethermind.govaudit.clients import EtherscanClient, SignatureLookupClient
from nethermind.govaudit.config import AuditConfig
from nethermind.govaudit.decoding import DecodeCache, FunctionDecoder
from nethermind.govaudit.exceptions import TraceError
from nethermind.govaudit.narration import CalldataNarrator
from nethermind.govaudit.tokens import TokenMetadataProvider
from nethermind.govaudit.types import Proposal, SimulationResult

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("audit")


def build_narrator(config: AuditConfig, session: aiohttp.ClientSession | None = None) -> CalldataNarrator:
    """Creates a narrator backed by the Etherscan ABI & signature database decoding pipeline"""
    explorer = EtherscanClient(
        api_key=config.require_api_key(),
        abi_cache=AbiCache(JsonFileCache(config.cache_dir / "abis")),
        chain_id=config.chain_id,
        base_url=config.etherscan_url,
        request_delay=config.explorer_request_delay,
        max_retries=config.explorer_max_retries,
        backoff=config.explorer_backoff,
        session=session,
    )
    signature_client = SignatureLookupClient(base_url=config.signature_lookup_url, session=session)

    return CalldataNarrator(
        decoder=FunctionDecoder.from_clients(explorer, signature_client, DecodeCache()),
        tokens=TokenMetadataProvider(json_rpc=config.json_rpc),
        native_symbol=config.native_symbol,
    )


def build_runner(config: AuditConfig, session: aiohttp.ClientSession | None = None) -> ProposalCheckRunner:
    """Creates a runner with the default proposal checks"""
    return ProposalCheckRunner(
        [
            DecodeCalldataCheck(build_narrator(config, session)),
            EthBalanceChangesCheck(dust_threshold=config.dust_threshold, native_symbol=config.native_symbol),
        ]
    )


def load_context(audit_input: dict[str, Any], timelock: str | None = None) -> ProposalContext:
    """
    Parses an audit input document.  Accepts either ``{"proposal": .., "sim": .., "timelock": ..}``, or a
    proposal cache entry storing that document under ``simulationData``.

    :param audit_input: decoded JSON document
    :param timelock: timelock address, overriding the address stored in the document
    """
    if "simulationData" in audit_input:
        audit_input = audit_input["simulationData"]

    if not isinstance(audit_input, dict) or "proposal" not in audit_input or "sim" not in audit_input:
        raise TraceError("Audit input must contain 'proposal' and 'sim' objects")

    timelock = timelock or _timelock_address(audit_input.get("timelock"))
    if not timelock:
        raise TraceError("Timelock address is required to locate proposal actions in the trace")

    return ProposalContext.create(
        proposal=Proposal.from_json(audit_input["proposal"]),
        sim=SimulationResult.from_json(audit_input["sim"]),
        timelock=timelock,
    )


def _timelock_address(timelock: Any) -> str | None:
    if isinstance(timelock, dict):
        return timelock.get("address")
    return timelock


def load_context_file(path: Path, timelock: str | None = None) -> ProposalContext:
    with open(path, "r", encoding="utf-8") as input_file:
        return load_context(json.load(input_file), timelock)


async def audit_proposal(context: ProposalContext, config: AuditConfig) -> list[CheckReport]:
    """Runs the default checks against a proposal, sharing one HTTP session between the API clients"""
    async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=60)) as session:
        runner = build_runner(config, session)
        logger.info(f"Auditing proposal with {len(context.proposal.actions)} actions")
        return await runner.run(context)
