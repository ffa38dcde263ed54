"""Provenance check: did a log come from the trusted marketplace contract?"""

import logging

logger = logging.getLogger(__name__)


def _normalize(address: str) -> str:
    return address.strip().lower()


def verify_contract_address(emitting_address: str | None, expected_address: str | None) -> bool:
    """Compare an emitting address against the expected one, ignoring case.

    With no expected address every origin is accepted.
    """
    if not expected_address:
        return True
    if not emitting_address:
        logger.warning("Log carries no contract address; cannot verify provenance")
        return False

    expected = _normalize(expected_address)
    received = _normalize(emitting_address)
    if received != expected:
        logger.warning(
            "contract_address_mismatch",
            extra={"expected": expected, "received": received},
        )
        return False
    return True


class ProvenanceVerifier:
    """Holds the configured marketplace address for a bridge instance."""

    def __init__(self, expected_address: str | None = None) -> None:
        self.expected_address = _normalize(expected_address) if expected_address else None

    @property
    def enabled(self) -> bool:
        return self.expected_address is not None

    def verify(self, emitting_address: str | None) -> bool:
        return verify_contract_address(emitting_address, self.expected_address)
