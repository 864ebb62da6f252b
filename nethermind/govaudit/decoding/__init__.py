from .cache import DecodeCache
from .dispatcher import DecodingDispatcher
from .pipeline import (
    CachedDecodeStrategy,
    DecodeStrategy,
    FunctionDecoder,
    SignatureLookupStrategy,
    VerifiedAbiStrategy,
)
