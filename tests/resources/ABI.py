ERC20_ABI_JSON = """[
    {"constant": true, "inputs": [], "name": "name", "outputs": [{"name": "", "type": "string"}],
     "payable": false, "stateMutability": "view", "type": "function"},
    {"constant": false, "inputs": [{"name": "spender", "type": "address"}, {"name": "amount", "type": "uint256"}],
     "name": "approve", "outputs": [{"name": "", "type": "bool"}], "payable": false,
     "stateMutability": "nonpayable", "type": "function"},
    {"constant": true, "inputs": [], "name": "totalSupply", "outputs": [{"name": "", "type": "uint256"}],
     "payable": false, "stateMutability": "view", "type": "function"},
    {"constant": false, "inputs": [{"name": "sender", "type": "address"}, {"name": "recipient", "type": "address"},
     {"name": "amount", "type": "uint256"}], "name": "transferFrom", "outputs": [{"name": "", "type": "bool"}],
     "payable": false, "stateMutability": "nonpayable", "type": "function"},
    {"constant": true, "inputs": [], "name": "decimals", "outputs": [{"name": "", "type": "uint8"}],
     "payable": false, "stateMutability": "view", "type": "function"},
    {"constant": true, "inputs": [{"name": "account", "type": "address"}], "name": "balanceOf",
     "outputs": [{"name": "", "type": "uint256"}], "payable": false, "stateMutability": "view", "type": "function"},
    {"constant": true, "inputs": [], "name": "symbol", "outputs": [{"name": "", "type": "string"}],
     "payable": false, "stateMutability": "view", "type": "function"},
    {"constant": false, "inputs": [{"name": "recipient", "type": "address"}, {"name": "amount", "type": "uint256"}],
     "name": "transfer", "outputs": [{"name": "", "type": "bool"}], "payable": false,
     "stateMutability": "nonpayable", "type": "function"},
    {"anonymous": false, "inputs": [{"indexed": true, "name": "from", "type": "address"},
     {"indexed": true, "name": "to", "type": "address"}, {"indexed": false, "name": "value", "type": "uint256"}],
     "name": "Transfer", "type": "event"}
]"""

TIMELOCK_ABI_JSON = """[
    {"inputs": [{"internalType": "uint256", "name": "delay_", "type": "uint256"}], "name": "setDelay",
     "outputs": [], "stateMutability": "nonpayable", "type": "function"},
    {"inputs": [{"internalType": "address", "name": "pendingAdmin_", "type": "address"}],
     "name": "setPendingAdmin", "outputs": [], "stateMutability": "nonpayable", "type": "function"},
    {"inputs": [{"components": [{"internalType": "address", "name": "target", "type": "address"},
     {"internalType": "uint256", "name": "value", "type": "uint256"}], "internalType": "struct Timelock.Call[]",
     "name": "calls", "type": "tuple[]"}, {"internalType": "bytes32", "name": "salt", "type": "bytes32"}],
     "name": "scheduleBatch", "outputs": [], "stateMutability": "nonpayable", "type": "function"}
]"""
