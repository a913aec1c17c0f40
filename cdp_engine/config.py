"""Configuration for the CDP math engine.

Holds the collateral table (token decimals and ilk identifiers) and the
engine-wide defaults. All configuration objects are frozen so they can be
shared freely between concurrent callers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from cdp_engine.constants import (
    MIN_VAULT_AMOUNT,
    SECONDS_PER_YEAR,
    WAD_DECIMALS,
    string_to_bytes32,
)


@dataclass(frozen=True)
class CollateralConfig:
    """A configured collateral type.

    Attributes:
        ilk_name: Collateral type name as registered in the Vat (e.g. "WBTC-A")
        token: Symbol of the underlying ERC20 token
        decimals: Token decimals (WBTC=8, USDC=6, ...)
    """

    ilk_name: str
    token: str
    decimals: int

    def __post_init__(self) -> None:
        if self.decimals < 0:
            raise ValueError(f"Token decimals must be non-negative, got {self.decimals}")

    @property
    def ilk(self) -> str:
        """bytes32 identifier of the collateral type."""
        return string_to_bytes32(self.ilk_name)


def _collaterals(*configs: CollateralConfig) -> Mapping[str, CollateralConfig]:
    return MappingProxyType({c.ilk_name: c for c in configs})


# Decimals for every token the engine knows about, including non-collateral
# tokens (the stablecoin and the savings/governance tokens).
TOKEN_DECIMALS: Mapping[str, int] = MappingProxyType(
    {
        "WBTC": 8,
        "WETH": 18,
        "USDT": 6,
        "USDC": 6,
        "DAI": 18,
        "KUSD": 18,
        "sKLC": 18,
        "KLC": 18,
    }
)

DEFAULT_COLLATERALS = _collaterals(
    CollateralConfig("WBTC-A", "WBTC", 8),
    CollateralConfig("WETH-A", "WETH", 18),
    CollateralConfig("USDT-A", "USDT", 6),
    CollateralConfig("USDC-A", "USDC", 6),
    CollateralConfig("DAI-A", "DAI", 18),
)


@dataclass(frozen=True)
class EngineConfig:
    """Engine-wide defaults.

    Attributes:
        collaterals: Collateral types keyed by ilk name
        token_decimals: Decimals per token symbol
        default_decimals: Decimals assumed for unknown tokens
        seconds_per_year: Compounding window for annual rate projections
        min_vault_amount: Minimum vault debt accepted by the frontend (WAD)
        rate_search_max_iterations: Bisection bound for per_second_rate
    """

    collaterals: Mapping[str, CollateralConfig] = field(default_factory=lambda: DEFAULT_COLLATERALS)
    token_decimals: Mapping[str, int] = field(default_factory=lambda: TOKEN_DECIMALS)
    default_decimals: int = WAD_DECIMALS
    seconds_per_year: int = SECONDS_PER_YEAR
    min_vault_amount: int = MIN_VAULT_AMOUNT
    rate_search_max_iterations: int = 256

    def decimals_for(self, symbol: str) -> int:
        """Return token decimals, falling back to default_decimals."""
        return self.token_decimals.get(symbol, self.default_decimals)

    def collateral(self, ilk_name: str) -> CollateralConfig:
        """Look up a collateral type by name.

        Raises:
            KeyError: If the collateral type is not configured
        """
        try:
            return self.collaterals[ilk_name]
        except KeyError:
            raise KeyError(f"Unknown collateral type: {ilk_name}") from None

    def ilk_to_name(self, ilk: str) -> str | None:
        """Reverse lookup from a bytes32 ilk identifier to its name."""
        ilk = ilk.lower()
        for config in self.collaterals.values():
            if config.ilk == ilk:
                return config.ilk_name
        return None


# Default configuration instance
DEFAULT_ENGINE_CONFIG = EngineConfig()
