"""Tests for marketplace contract provenance checks."""

from rose_bridge.chain.provenance import ProvenanceVerifier, verify_contract_address

from tests.conftest import MARKETPLACE


def test_exact_match():
    assert verify_contract_address(MARKETPLACE, MARKETPLACE)


def test_match_ignores_case():
    assert verify_contract_address(MARKETPLACE.lower(), MARKETPLACE.upper().replace("0X", "0x"))
    assert verify_contract_address(MARKETPLACE.upper().replace("0X", "0x"), MARKETPLACE.lower())


def test_mismatch_rejected():
    assert not verify_contract_address("0x0987654321098765432109876543210987654321", MARKETPLACE)


def test_unconfigured_accepts_everything():
    assert verify_contract_address("0x0987654321098765432109876543210987654321", None)
    assert verify_contract_address(None, None)


def test_missing_emitting_address_rejected_when_configured():
    assert not verify_contract_address(None, MARKETPLACE)
    assert not verify_contract_address("", MARKETPLACE)


def test_verifier_normalizes_configured_address():
    verifier = ProvenanceVerifier(MARKETPLACE.upper().replace("0X", "0x"))
    assert verifier.enabled
    assert verifier.expected_address == MARKETPLACE.lower()
    assert verifier.verify(MARKETPLACE)


def test_verifier_disabled_without_address():
    verifier = ProvenanceVerifier(None)
    assert not verifier.enabled
    assert verifier.verify("0x0000000000000000000000000000000000000001")


def test_verifiers_are_independent():
    strict = ProvenanceVerifier(MARKETPLACE)
    open_ = ProvenanceVerifier()
    other = "0x0987654321098765432109876543210987654321"
    assert not strict.verify(other)
    assert open_.verify(other)
