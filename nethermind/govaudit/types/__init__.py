from .decoding import DecodeCacheKey, DecodedFunction, DecodeSource
from .proposal import Proposal, ProposalAction
from .trace import Call, ContractInfo, ContractRegistry, DecodedArgument, SimulationResult, walk_calls
