"""Test helpers module for shared test utilities.

- factories: raw on-chain state builders (urn, ilk, spotter)
- reference_math: independent DSS math used to cross-check the engine
"""

from tests.helpers.factories import (
    DUTY_2PCT,
    make_ilk,
    make_spotter,
    make_urn,
)

__all__ = [
    "DUTY_2PCT",
    "make_urn",
    "make_ilk",
    "make_spotter",
]
