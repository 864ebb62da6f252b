import json

import pytest
from click.testing import CliRunner

from nethermind.govaudit.audit import build_runner, load_context, load_context_file
from nethermind.govaudit.checks import DecodeCalldataCheck, EthBalanceChangesCheck
from nethermind.govaudit.cli import govaudit_cli
from nethermind.govaudit.config import AuditConfig
from nethermind.govaudit.exceptions import ConfigurationError, TraceError

TIMELOCK = "0x1a9C8182C09F50C8318d769245beA52c32BE35BC"

AUDIT_INPUT = {
    "proposal": {"id": 12, "targets": [TIMELOCK], "values": ["0"], "signatures": [""], "calldatas": ["0x"]},
    "sim": {"transaction": {"transaction_info": {"call_trace": None}}, "contracts": []},
    "timelock": {"address": TIMELOCK},
}


def test_load_context():
    context = load_context(AUDIT_INPUT)

    assert context.timelock == TIMELOCK
    assert context.proposal.proposal_id == "12"
    assert context.sim.call_trace is None


def test_load_context_from_cache_entry(tmp_path):
    path = tmp_path / "proposal.json"
    path.write_text(
        json.dumps({"timestamp": 1700000000, "proposalState": "Executed", "simulationData": AUDIT_INPUT}),
        encoding="utf-8",
    )

    context = load_context_file(path, timelock="0x00000000000000000000000000000000000000aa")

    assert context.timelock == "0x00000000000000000000000000000000000000aa"
    assert len(context.proposal.actions) == 1


def test_load_context_requires_timelock():
    with pytest.raises(TraceError):
        load_context({"proposal": AUDIT_INPUT["proposal"], "sim": AUDIT_INPUT["sim"]})

    with pytest.raises(TraceError):
        load_context({"sim": AUDIT_INPUT["sim"], "timelock": TIMELOCK})


def test_build_runner(tmp_path):
    runner = build_runner(AuditConfig(etherscan_api_key="key", cache_dir=tmp_path))

    assert [type(check) for check in runner.checks] == [DecodeCalldataCheck, EthBalanceChangesCheck]


def test_build_runner_requires_api_key(tmp_path):
    with pytest.raises(ConfigurationError):
        build_runner(AuditConfig(etherscan_api_key=None, cache_dir=tmp_path))


def test_config_overrides(monkeypatch):
    monkeypatch.setenv("ETHERSCAN_API_KEY", "from-env")
    monkeypatch.setenv("CHAIN_ID", "10")

    assert AuditConfig.from_env().etherscan_api_key == "from-env"
    assert AuditConfig.from_env().chain_id == 10
    assert AuditConfig.from_env(etherscan_api_key="from-cli").etherscan_api_key == "from-cli"
    assert AuditConfig.from_env(etherscan_api_key=None).etherscan_api_key == "from-env"


def test_cli_audit_without_api_key(tmp_path):
    path = tmp_path / "proposal.json"
    path.write_text(json.dumps(AUDIT_INPUT), encoding="utf-8")

    result = CliRunner().invoke(govaudit_cli, ["audit", str(path), "--api-key", "", "--cache-dir", str(tmp_path)])

    assert result.exit_code == 1


def test_cli_cache_status(tmp_path):
    result = CliRunner().invoke(
        govaudit_cli,
        ["cache", "status", "Uniswap", TIMELOCK, "42", "--state", "Active", "--cache-dir", str(tmp_path)],
    )

    assert result.exit_code == 0
    assert "not cached" in result.output
    assert "needs simulation" in result.output
