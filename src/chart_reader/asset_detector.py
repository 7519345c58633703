"""
Asset detection from chart header text.

Rules are evaluated top to bottom and the first match wins. Order matters:
broad catch-all rules (e.g. "PERP", "NZD") sit below the specific tickers they
would otherwise shadow, and all crypto rules run before forex, forex before
stocks.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern

from ..fib_analysis.types import AssetInfo, AssetType


@dataclass(frozen=True)
class AssetRule:
    """
    One row of the detection table.

    Attributes:
        pattern: Regex tested against the header text.
        name: Asset name reported on match.
        asset_type: Asset class reported on match.
        ticker_pattern: If set, the first match of this regex in the text is
            reported instead of `name` (falls back to `name` when absent).
    """
    pattern: Pattern
    name: str
    asset_type: AssetType
    ticker_pattern: Optional[Pattern] = None

    def resolve_name(self, text: str) -> str:
        if self.ticker_pattern is not None:
            found = self.ticker_pattern.search(text)
            if found:
                return found.group(0)
        return self.name


def _rule(pattern: str, name: str, asset_type: AssetType, ticker: str = None) -> AssetRule:
    return AssetRule(
        pattern=re.compile(pattern, re.IGNORECASE),
        name=name,
        asset_type=asset_type,
        ticker_pattern=re.compile(ticker) if ticker else None,
    )


ASSET_RULES: List[AssetRule] = [
    # Crypto
    _rule(r"BTC|BITCOIN", "BTC", AssetType.CRYPTO),
    _rule(r"ETH|ETHEREUM", "ETH", AssetType.CRYPTO),
    _rule(r"BNB|BINANCE", "BNB", AssetType.CRYPTO),
    _rule(r"SOL|SOLANA", "SOL", AssetType.CRYPTO),
    _rule(r"XRP|RIPPLE", "XRP", AssetType.CRYPTO),
    _rule(r"ADA|CARDANO", "ADA", AssetType.CRYPTO),
    _rule(r"DOGE", "DOGE", AssetType.CRYPTO),
    _rule(r"USDT|USDC|BUSD", "STABLECOIN", AssetType.CRYPTO),
    _rule(r"PERP|SWAP|FUTURES", "CRYPTO", AssetType.CRYPTO),
    # Forex
    _rule(r"EUR/?USD", "EUR/USD", AssetType.FOREX),
    _rule(r"GBP/?USD", "GBP/USD", AssetType.FOREX),
    _rule(r"USD/?JPY", "USD/JPY", AssetType.FOREX),
    _rule(r"AUD/?USD", "AUD/USD", AssetType.FOREX),
    _rule(r"USD/?CHF", "USD/CHF", AssetType.FOREX),
    _rule(r"USD/?CAD", "USD/CAD", AssetType.FOREX),
    _rule(r"XAU/?USD|GOLD", "XAU/USD", AssetType.FOREX),
    _rule(r"NZD|CHF|NOK|SEK", "FOREX", AssetType.FOREX),
    # Indonesian stocks
    _rule(r"BBCA|BBRI|BMRI|BBNI", "STOCK", AssetType.STOCK, ticker=r"BB[A-Z]{2}|BM[A-Z]{2}"),
    _rule(r"TLKM|ASII|UNVR|HMSP", "STOCK", AssetType.STOCK, ticker=r"[A-Z]{4}"),
    _rule(r"IHSG|IDX|COMPOSITE", "IHSG", AssetType.STOCK),
    _rule(r"\.JK|JAKARTA", "STOCK", AssetType.STOCK),
]

UNKNOWN_ASSET = AssetInfo(name="UNKNOWN", asset_type=AssetType.CRYPTO, confidence=0)


def detect_asset_type(text: str, confidence: float = 0, rules: List[AssetRule] = None) -> AssetInfo:
    """
    Detect the asset from header text.

    Args:
        text: Recognized header text.
        confidence: Recognition confidence, passed through on a match.
        rules: Detection table (defaults to ASSET_RULES).

    Returns:
        AssetInfo of the first matching rule, or UNKNOWN_ASSET.
    """
    text = text.upper()
    for rule in (rules if rules is not None else ASSET_RULES):
        if rule.pattern.search(text):
            return AssetInfo(name=rule.resolve_name(text), asset_type=rule.asset_type, confidence=confidence)
    return UNKNOWN_ASSET
