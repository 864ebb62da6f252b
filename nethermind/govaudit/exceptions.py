class ConfigurationError(Exception):
    """

    Raised when required configuration is missing or invalid, ie no Etherscan API key is supplied.  This is the
    only error that is allowed to halt an audit run.

    """


class TraceError(Exception):
    """

    Raised when the simulation trace JSON cannot be converted into Call objects

    """


class DecodingError(Exception):
    """

    Raised when issues occur with calldata decoding.  Always handled by the decoding pipeline, which falls
    through to the next decoding tier.

    """


class ExplorerError(Exception):
    """

    Raised when the block explorer returns an error or fails to provide an ABI

    """


class ExplorerRateLimitError(ExplorerError):
    """Raised when rate limits are enforced by the block explorer"""


class ExplorerHostError(ExplorerError):
    """Raised when the block explorer returns a server error, or when a timeout occurs"""


class SignatureLookupError(Exception):
    """Raised when the public signature database cannot be queried"""


class CacheError(Exception):
    """

    Raised when a cache file cannot be read or parsed.  Callers treat this as a cache miss.

    """
