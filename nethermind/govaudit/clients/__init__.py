from .etherscan import EtherscanClient
from .signatures import SignatureLookupClient
