"""Pytest configuration and fixtures."""

import pytest

from cdp_engine.constants import WAD
from cdp_engine.position import IlkState, SpotterIlk, UrnState
from tests.helpers import make_ilk, make_spotter, make_urn


@pytest.fixture
def urn() -> UrnState:
    """10 collateral, 10,000 normalized debt."""
    return make_urn()


@pytest.fixture
def ilk() -> IlkState:
    """Collateral type with rate == RAY (no fees accrued yet)."""
    return make_ilk()


@pytest.fixture
def spotter() -> SpotterIlk:
    """150% liquidation ratio."""
    return make_spotter()


@pytest.fixture
def price() -> int:
    """$2000 oracle price (WAD)."""
    return 2000 * WAD


@pytest.fixture
def liquidation_ratio() -> int:
    """150% in WAD."""
    return 3 * WAD // 2
