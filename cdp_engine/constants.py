"""Protocol constants for the CDP math engine.

The mirrored DSS contracts use three fixed-point precisions:
- WAD: 18 decimals, token quantities and prices
- RAY: 27 decimals, rates and ratios
- RAD: 45 decimals, aggregate debt (WAD * RAY)
"""

# =============================================================================
# Precision constants
# =============================================================================

WAD_DECIMALS = 18
RAY_DECIMALS = 27
RAD_DECIMALS = 45

WAD = 10**WAD_DECIMALS
RAY = 10**RAY_DECIMALS
RAD = 10**RAD_DECIMALS

HALF_RAY = RAY // 2

# Ratios between scales (used by the named conversions)
WAD_RAY_RATIO = RAY // WAD  # 10^9
RAY_RAD_RATIO = RAD // RAY  # 10^18
WAD_RAD_RATIO = RAD // WAD  # 10^27

# Largest value that fits in an EVM word
UINT256_MAX = 2**256 - 1

# =============================================================================
# Time and percentage constants
# =============================================================================

SECONDS_PER_YEAR = 365 * 24 * 60 * 60  # 31,536,000

BPS_BASE = 10_000  # 100% = 10,000 basis points
PERCENT_BASE = 100

# Minimum vault debt accepted by the frontend (100 units, WAD)
MIN_VAULT_AMOUNT = 100 * WAD


def string_to_bytes32(name: str) -> str:
    """Encode a collateral name (e.g. "WBTC-A") as a bytes32 hex string.

    The name is right-padded with NUL bytes to 32 bytes, matching how ilk
    identifiers are stored on-chain.

    Raises:
        ValueError: If the encoded name is longer than 32 bytes
    """
    raw = name.encode("ascii")
    if len(raw) > 32:
        raise ValueError(f"Name too long for bytes32: {name!r} ({len(raw)} bytes)")
    return "0x" + raw.ljust(32, b"\x00").hex()


def bytes32_to_string(value: str) -> str:
    """Decode a bytes32 hex string back into its NUL-stripped name."""
    hex_part = value[2:] if value.startswith("0x") else value
    return bytes.fromhex(hex_part).rstrip(b"\x00").decode("ascii")
