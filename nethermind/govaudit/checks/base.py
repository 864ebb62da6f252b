from dataclasses import dataclass, field
from typing import Protocol

from nethermind.govaudit.types import ContractRegistry, Proposal, SimulationResult


@dataclass
class CheckResult:
    """Lines reported by a proposal check"""

    info: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors


@dataclass
class ProposalContext:
    """Proposal under audit, the simulation of its execution, and the timelock that executes it"""

    proposal: Proposal
    sim: SimulationResult
    timelock: str
    registry: ContractRegistry = field(default_factory=ContractRegistry)

    @classmethod
    def create(cls, proposal: Proposal, sim: SimulationResult, timelock: str) -> "ProposalContext":
        """Creates a context, resolving contract names from the contracts in the simulation"""
        return cls(proposal=proposal, sim=sim, timelock=timelock, registry=ContractRegistry(sim.contracts))


class ProposalCheck(Protocol):
    """Single check run against a simulated proposal"""

    name: str

    async def check_proposal(self, context: ProposalContext) -> CheckResult:
        raise NotImplementedError()
