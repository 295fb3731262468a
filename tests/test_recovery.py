import unittest
from unittest import mock

from eth_keys import keys
from eth_keys.exceptions import BadSignature

from sigverify import (
    Identity,
    RecoveryFailed,
    VerificationStatus,
    decode_signature,
    hash_message,
    recover_identity,
    recover_public_key,
    verify,
)
from sigverify.datatypes import SECPK1_N
from sigverify.helpers.recovery import SECPK1_B, SECPK1_P

PRIVATE_KEY = keys.PrivateKey(b"\x11" * 32)  # Test private key (DO NOT USE IN PRODUCTION)


def _fake_backend(public_key_bytes=None, error=None):
    """A stand-in for eth_keys.keys whose recovery returns/raises what we choose."""
    backend = mock.MagicMock()
    recover = backend.Signature.return_value.recover_public_key_from_msg_hash
    if error is not None:
        recover.side_effect = error
    else:
        recover.return_value.to_bytes.return_value = public_key_bytes
    return backend


class RecoverTests(unittest.TestCase):
    def setUp(self):
        self.digest = hash_message(b"Hello, Ethereum!")
        self.signature = decode_signature(PRIVATE_KEY.sign_msg_hash(self.digest.value).to_bytes())

    def test_recovers_public_key(self):
        raw = recover_public_key(self.digest, self.signature)
        self.assertEqual(raw, PRIVATE_KEY.public_key.to_bytes())

    def test_recovers_identity(self):
        identity = recover_identity(self.digest, self.signature)
        self.assertEqual(identity.value, PRIVATE_KEY.public_key.to_canonical_address())
        self.assertEqual(identity.checksum_address, PRIVATE_KEY.public_key.to_checksum_address())

    def test_other_digest_recovers_other_identity(self):
        other = hash_message(b"Hello, Ethereum?")
        try:
            identity = recover_identity(other, self.signature)
        except RecoveryFailed:
            return
        self.assertNotEqual(identity.value, PRIVATE_KEY.public_key.to_canonical_address())

    def test_high_s_twin_recovers_same_key_in_eth_keys(self):
        # The malleable twin (r, n - s, !v) is accepted by eth_keys itself,
        # which is why the codec has to reject it.
        v, r, s = self.signature.vrs
        twin = keys.Signature(vrs=(1 - v, r, SECPK1_N - s))
        self.assertEqual(twin.recover_public_key_from_msg_hash(self.digest.value), PRIVATE_KEY.public_key)

    def test_backend_error_becomes_recovery_failed(self):
        backend = _fake_backend(error=BadSignature("Invalid signature"))
        with mock.patch("sigverify.helpers.recovery.keys", backend):
            with self.assertRaises(RecoveryFailed) as ctx:
                recover_public_key(self.digest, self.signature)
        self.assertIsInstance(ctx.exception.__cause__, BadSignature)

    def test_point_at_infinity(self):
        backend = _fake_backend(public_key_bytes=b"\x00" * 64)
        with mock.patch("sigverify.helpers.recovery.keys", backend):
            with self.assertRaises(RecoveryFailed):
                recover_identity(self.digest, self.signature)

    def test_point_off_curve(self):
        backend = _fake_backend(public_key_bytes=(1).to_bytes(32, "big") + (1).to_bytes(32, "big"))
        with mock.patch("sigverify.helpers.recovery.keys", backend):
            with self.assertRaises(RecoveryFailed):
                recover_identity(self.digest, self.signature)


class IdentityTests(unittest.TestCase):
    def test_from_public_key_is_keccak_tail(self):
        public_key = PRIVATE_KEY.public_key
        self.assertEqual(Identity.from_public_key(public_key.to_bytes()).value, public_key.to_canonical_address())

    def test_parse_forms(self):
        address = PRIVATE_KEY.public_key.to_checksum_address()
        canonical = PRIVATE_KEY.public_key.to_canonical_address()
        self.assertEqual(Identity.parse(address).value, canonical)
        self.assertEqual(Identity.parse(address.lower()).value, canonical)
        self.assertEqual(Identity.parse(canonical).value, canonical)
        identity = Identity(canonical)
        self.assertIs(Identity.parse(identity), identity)
        self.assertEqual(str(identity), address)

    def test_parse_rejects_bad_input(self):
        from sigverify import InvalidIdentity

        address = PRIVATE_KEY.public_key.to_checksum_address()
        # Flip the case of one letter to break the EIP-55 checksum
        idx = next(i for i, c in enumerate(address) if i > 1 and c.isalpha())
        broken = address[:idx] + address[idx].swapcase() + address[idx + 1:]
        for bad in ("0x1234", "not an address", broken, b"\x00" * 19, 42):
            with self.assertRaises(InvalidIdentity):
                Identity.parse(bad)

    def test_parse_rejects_wrong_checksum_case(self):
        from sigverify import InvalidIdentity

        address = PRIVATE_KEY.public_key.to_checksum_address()
        self.assertEqual(address, "0x19E7E376E7C213B7E7e7e46cc70A5dD086DAff2A")
        with self.assertRaises(InvalidIdentity):
            Identity.parse("0x19e7E376E7C213B7E7e7e46cc70A5dD086DAff2A")


def _first_non_residue_x() -> int:
    """Smallest x for which x^3 + 7 has no square root mod p (not an x-coordinate)."""
    x = 1
    while pow((x ** 3 + SECPK1_B) % SECPK1_P, (SECPK1_P - 1) // 2, SECPK1_P) != SECPK1_P - 1:
        x += 1
    return x


class UnrecoverableSignatureTests(unittest.TestCase):
    def test_r_not_on_curve_fails_recovery(self):
        digest = hash_message(b"Hello, Ethereum!")
        r = _first_non_residue_x()
        data = r.to_bytes(32, "big") + (1).to_bytes(32, "big") + b"\x00"

        with self.assertRaises(RecoveryFailed):
            recover_identity(digest, decode_signature(data))

        result = verify(digest, data, PRIVATE_KEY.public_key.to_checksum_address())
        self.assertEqual(result.status, VerificationStatus.RECOVERY_FAILED)
        self.assertIsInstance(result.error, RecoveryFailed)
