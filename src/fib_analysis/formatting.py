"""Price formatting per asset class."""

import math
from typing import Optional, Union

from .types import AssetType

MISSING_PRICE = "—"


def format_price(price: Optional[float], asset_type: Union[AssetType, str] = AssetType.CRYPTO) -> str:
    """
    Format a price for display.

    Forex quotes get 5 decimals, stocks are whole Rupiah with dot thousands
    separators, crypto (the default) is dollar-prefixed with precision that
    grows as the price shrinks.
    """
    if price is None or math.isnan(price):
        return MISSING_PRICE

    asset_type = AssetType(asset_type)

    if asset_type == AssetType.FOREX:
        return f"{price:.5f}"

    if asset_type == AssetType.STOCK:
        return "Rp " + f"{round(price):,}".replace(",", ".")

    if price >= 1000:
        return f"${price:,.2f}"
    if price >= 1:
        return f"${price:.4f}"
    return f"${price:.8f}"


def timeframe_for(asset_type: Union[AssetType, str]) -> str:
    """Candle timeframe the narrative refers to."""
    return {
        AssetType.CRYPTO: "4H",
        AssetType.FOREX: "1H",
        AssetType.STOCK: "Daily",
    }[AssetType(asset_type)]


def asset_label(asset_type: Union[AssetType, str]) -> str:
    return {
        AssetType.CRYPTO: "crypto asset",
        AssetType.FOREX: "forex pair",
        AssetType.STOCK: "stock",
    }[AssetType(asset_type)]
