from .base import CheckResult, ProposalCheck, ProposalContext
from .decode_calldata import DecodeCalldataCheck
from .eth_balance_changes import NO_BALANCE_CHANGES, EthBalanceChangesCheck
from .runner import CheckReport, ProposalCheckRunner
