from .balances import BalanceChange, BalanceRecord, aggregate_balance_changes, compute_balance_changes
from .search import find_matching_call, resolve_proxy_depth
