from .abi_cache import AbiCache, AbiCacheKey
from .base import JsonFileCache
from .proposal_cache import ProposalCache, ProposalCacheEntry, ProposalState
