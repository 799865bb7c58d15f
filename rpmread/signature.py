"""Package integrity checks: MD5 checksums and GPG signatures."""

from __future__ import annotations

import hashlib
from typing import BinaryIO

from .header import Header, read_header
from .lead import read_lead
from .pgp import KeyRing, PGPError, UnknownIssuerError, parse_signature
from .util import RPMError, format_time

_GPG_TAGS = (
    1002,  # RPMSIGTAG_PGP
    1006,  # RPMSIGTAG_PGP5
    1005,  # RPMSIGTAG_GPG
)

_PUBKEY_NAMES = {
    1: "RSA",
    2: "RSA(Encrypt-Only)",
    3: "RSA(Sign-Only)",
    16: "Elgamal",
    17: "DSA",
    18: "Elliptic Curve",
    19: "ECDSA",
}

_HASH_NAMES = {
    1: "MD5",
    2: "SHA1",
    3: "RIPEMD160",
    8: "SHA256",
    9: "SHA384",
    10: "SHA512",
    11: "SHA224",
}


class MD5CheckFailed(RPMError):
    """The package failed MD5 checksum validation."""

    def __init__(self, message: str = "MD5 checksum validation failed") -> None:
        super().__init__(message)


class GPGCheckFailed(RPMError):
    """The package failed GPG signature validation."""

    def __init__(self, message: str = "GPG signature validation failed") -> None:
        super().__init__(message)


class GPGSignature(bytes):
    """The raw bytes of a package's signature."""

    def __str__(self) -> str:
        """Describe a version 3 signature as ``rpm --info`` does, else ``""``."""
        try:
            sig = parse_signature(self)
        except PGPError:
            return ""
        if sig.version != 3 or sig.creation_time is None:
            return ""
        algo = _PUBKEY_NAMES.get(sig.pubkey_algo, "Unknown public key algorithm")
        hasher = _HASH_NAMES.get(sig.hash_algo, "Unknown hash algorithm")
        return (
            f"{algo}/{hasher}, {format_time(sig.creation_time)}, "
            f"Key ID {sig.issuer_key_id:x}"
        )


def read_sig_header(stream: BinaryIO) -> Header:
    """Read the lead and signature header, leaving the stream at the main header."""
    lead = read_lead(stream)
    if lead.signature_type != 5:  # RPMSIGTYPE_HEADERSIG
        raise RPMError(f"unknown signature type: {lead.signature_type:x}")
    return read_header(stream, True)


def gpg_check(stream: BinaryIO, keyring: KeyRing) -> str:
    """Validate a package's GPG signature and return the signer's identity.

    Raises :class:`GPGCheckFailed` if no key in ``keyring`` made the signature.
    """
    sig = read_sig_header(stream)
    sigval = next(
        (value for value in (sig.get_tag(t).bytes() for t in _GPG_TAGS) if value),
        b"",
    )
    if not sigval:
        raise RPMError("package signature not found")
    try:
        signer = keyring.check_detached_signature(stream, sigval)
    except UnknownIssuerError as exc:
        raise GPGCheckFailed() from exc
    if not signer.identities:
        raise RPMError("no identity found in public key")
    return signer.identities[0]


def md5_check(stream: BinaryIO) -> None:
    """Validate the MD5 checksum of the header and payload.

    Raises :class:`MD5CheckFailed` if the checksum or the size does not match.
    """
    sig = read_sig_header(stream)
    size = sig.get_tag(270).int() or sig.get_tag(1000).int()
    if size == 0:
        raise RPMError("tag not found: RPMSIGTAG_SIZE")
    expected = sig.get_tag(1004).bytes()
    if not expected:
        raise RPMError("tag not found: RPMSIGTAG_MD5")
    h = hashlib.md5()
    count = 0
    for chunk in iter(lambda: stream.read(65536), b""):
        h.update(chunk)
        count += len(chunk)
    if count != size or h.digest() != expected:
        raise MD5CheckFailed()