from .erc_20 import ERC20Token, TokenMetadataProvider
