from dataclasses import dataclass, field
from typing import Any

from eth_utils import function_signature_to_4byte_selector

from nethermind.govaudit.exceptions import TraceError
from nethermind.govaudit.utils import normalize_hex, parse_int


@dataclass
class ProposalAction:
    """Single action of a governance proposal"""

    target: str
    value: int
    signature: str
    calldata: str

    @property
    def calldata_with_selector(self) -> str:
        """
        Returns the calldata executed on the target.  If the action has a signature, the 4 byte selector of the
        signature is prepended to the calldata, otherwise the calldata already embeds the selector.

        >>> ProposalAction("0x..", 0, "transfer(address,uint256)", "0x").calldata_with_selector
        '0xa9059cbb'
        """
        if not self.signature:
            return normalize_hex(self.calldata)
        selector = function_signature_to_4byte_selector(self.signature).hex()
        return "0x" + selector + normalize_hex(self.calldata)[2:]


@dataclass
class Proposal:
    """Governance proposal.  Actions are stored in execution order"""

    actions: list[ProposalAction] = field(default_factory=list)
    description: str = ""
    proposal_id: str | None = None

    @classmethod
    def from_json(cls, proposal: dict[str, Any]) -> "Proposal":
        """
        Parses a proposal from the index aligned ``targets``, ``values``, ``signatures`` and ``calldatas`` arrays.
        Missing ``values`` and ``signatures`` default to zero and empty signatures.
        """
        targets = proposal.get("targets") or []
        calldatas = proposal.get("calldatas") or []
        values = proposal.get("values") or [0] * len(targets)
        signatures = proposal.get("signatures") or [""] * len(targets)

        if not len(targets) == len(values) == len(signatures) == len(calldatas):
            raise TraceError(
                f"Proposal arrays have mismatched lengths: {len(targets)} targets, {len(values)} values, "
                f"{len(signatures)} signatures, {len(calldatas)} calldatas"
            )

        return cls(
            actions=[
                ProposalAction(target=t, value=parse_int(v), signature=s or "", calldata=c or "0x")
                for t, v, s, c in zip(targets, values, signatures, calldatas, strict=True)
            ],
            description=proposal.get("description") or "",
            proposal_id=str(proposal["id"]) if proposal.get("id") is not None else None,
        )
