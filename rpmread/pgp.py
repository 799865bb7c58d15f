"""A small OpenPGP reader: armored key rings and detached signature checks."""

from __future__ import annotations

import base64
import binascii
import hashlib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import BinaryIO, Iterator, Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import dsa, padding, rsa, utils

from .util import RPMError

_HASHES = {
    1: ("md5", hashes.MD5),
    2: ("sha1", hashes.SHA1),
    8: ("sha256", hashes.SHA256),
    9: ("sha384", hashes.SHA384),
    10: ("sha512", hashes.SHA512),
    11: ("sha224", hashes.SHA224),
}

_RSA_ALGOS = (1, 2, 3)
_DSA_ALGO = 17
_KEY_PARAM_COUNTS = {1: 2, 2: 2, 3: 2, 16: 3, 17: 4}
_SIG_VALUE_COUNTS = {1: 1, 2: 1, 3: 1, 17: 2, 19: 2, 22: 2}


class PGPError(RPMError):
    """Malformed OpenPGP data or a signature that does not verify."""


class UnknownIssuerError(PGPError):
    """No key in the key ring made the signature."""

    def __init__(self, message: str = "signature made by unknown entity") -> None:
        super().__init__(message)


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self.pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self.pos

    def take(self, n: int) -> bytes:
        if n < 0 or self.pos + n > len(self._data):
            raise PGPError("truncated packet")
        chunk = self._data[self.pos:self.pos + n]
        self.pos += n
        return chunk

    def uint(self, n: int) -> int:
        return int.from_bytes(self.take(n), "big")

    def u8(self) -> int:
        return self.uint(1)

    def mpi(self) -> int:
        bits = self.uint(2)
        return int.from_bytes(self.take((bits + 7) // 8), "big")


def _packets(data: bytes) -> Iterator[tuple[int, bytes]]:
    r = _Reader(data)
    while r.remaining:
        ctb = r.u8()
        if not ctb & 0x80:
            raise PGPError("invalid packet header")
        if ctb & 0x40:
            tag = ctb & 0x3F
            body = bytearray()
            while True:
                first = r.u8()
                partial = False
                if first < 192:
                    length = first
                elif first < 224:
                    length = ((first - 192) << 8) + r.u8() + 192
                elif first == 255:
                    length = r.uint(4)
                else:
                    length = 1 << (first & 0x1F)
                    partial = True
                body += r.take(length)
                if not partial:
                    break
            yield tag, bytes(body)
        else:
            tag = (ctb >> 2) & 0x0F
            length_type = ctb & 0x03
            if length_type == 3:
                length = r.remaining
            else:
                length = r.uint((1, 2, 4)[length_type])
            yield tag, r.take(length)


def _crc24(data: bytes) -> int:
    crc = 0xB704CE
    for byte in data:
        crc ^= byte << 16
        for _ in range(8):
            crc <<= 1
            if crc & 0x1000000:
                crc ^= 0x1864CFB
    return crc & 0xFFFFFF


def decode_armor(text: Union[str, bytes]) -> bytes:
    """Decode an ASCII-armored OpenPGP block into its binary form."""
    if isinstance(text, bytes):
        text = text.decode("ascii", "replace")
    lines = iter(text.splitlines())
    for line in lines:
        if line.strip().startswith("-----BEGIN PGP"):
            break
    else:
        raise PGPError("no armored data found")

    for line in lines:
        if not line.strip():
            break
        if ":" not in line:
            body_lines = [line.strip()]
            break
    else:
        raise PGPError("unterminated armored data")
    if "body_lines" not in locals():
        body_lines = []

    checksum: Optional[str] = None
    for line in lines:
        line = line.strip()
        if line.startswith("-----END PGP"):
            break
        if line.startswith("=") and len(line) == 5:
            checksum = line[1:]
        elif line:
            body_lines.append(line)
    else:
        raise PGPError("unterminated armored data")

    try:
        data = base64.b64decode("".join(body_lines), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise PGPError(f"invalid armored data: {exc}") from None
    if checksum is not None:
        try:
            expected = int.from_bytes(base64.b64decode(checksum, validate=True), "big")
        except (binascii.Error, ValueError):
            raise PGPError("invalid armor checksum") from None
        if expected != _crc24(data):
            raise PGPError("armor checksum mismatch")
    return data


@dataclass(frozen=True)
class SignatureInfo:
    """The fields of a version 3 or version 4 signature packet."""

    version: int
    sig_type: int
    pubkey_algo: int
    hash_algo: int
    creation_time: Optional[datetime]
    issuer_key_id: Optional[int]
    hash_prefix: bytes
    values: tuple[int, ...]
    trailer: bytes


def _timestamp(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def _subpackets(data: bytes) -> Iterator[tuple[int, bytes]]:
    r = _Reader(data)
    while r.remaining:
        first = r.u8()
        if first < 192:
            length = first
        elif first < 255:
            length = ((first - 192) << 8) + r.u8() + 192
        else:
            length = r.uint(4)
        if length == 0:
            raise PGPError("empty signature subpacket")
        kind = r.u8() & 0x7F
        yield kind, r.take(length - 1)


def _parse_signature_body(body: bytes) -> SignatureInfo:
    r = _Reader(body)
    version = r.u8()
    if version in (2, 3):
        if r.u8() != 5:
            raise PGPError("invalid hashed material length")
        sig_type = r.u8()
        creation_time = _timestamp(r.uint(4))
        issuer: Optional[int] = r.uint(8)
        pubkey_algo = r.u8()
        hash_algo = r.u8()
        trailer = body[2:7]
    elif version == 4:
        sig_type = r.u8()
        pubkey_algo = r.u8()
        hash_algo = r.u8()
        hashed = r.take(r.uint(2))
        unhashed = r.take(r.uint(2))
        hashed_part = body[:6 + len(hashed)]
        trailer = hashed_part + b"\x04\xff" + len(hashed_part).to_bytes(4, "big")
        creation_time = None
        issuer = None
        for area in (hashed, unhashed):
            for kind, payload in _subpackets(area):
                if kind == 2 and len(payload) == 4 and creation_time is None:
                    creation_time = _timestamp(int.from_bytes(payload, "big"))
                elif kind == 16 and len(payload) == 8 and issuer is None:
                    issuer = int.from_bytes(payload, "big")
                elif kind == 33 and len(payload) >= 9 and issuer is None:
                    issuer = int.from_bytes(payload[-8:], "big")
    else:
        raise PGPError(f"unsupported signature version: {version}")

    prefix = r.take(2)
    count = _SIG_VALUE_COUNTS.get(pubkey_algo)
    values = []
    while (count is None and r.remaining) or (count is not None and len(values) < count):
        values.append(r.mpi())
    return SignatureInfo(
        version=version,
        sig_type=sig_type,
        pubkey_algo=pubkey_algo,
        hash_algo=hash_algo,
        creation_time=creation_time,
        issuer_key_id=issuer,
        hash_prefix=prefix,
        values=tuple(values),
        trailer=trailer,
    )


def parse_signature(data: bytes) -> SignatureInfo:
    """Parse the signature packet at the start of binary OpenPGP data."""
    for tag, body in _packets(bytes(data)):
        if tag != 2:
            raise PGPError(f"expected a signature packet, got packet type {tag}")
        return _parse_signature_body(body)
    raise PGPError("no signature packet found")


@dataclass(frozen=True)
class PublicKey:
    """An OpenPGP public key or subkey."""

    version: int
    algorithm: int
    creation_time: datetime
    key_id: int
    fingerprint: bytes
    params: tuple[int, ...]

    def _verify(self, sig: SignatureInfo, digest: bytes) -> bool:
        if sig.hash_prefix != digest[:2]:
            return False
        hash_cls = _HASHES[sig.hash_algo][1]
        try:
            if self.algorithm in _RSA_ALGOS:
                n, e = self.params
                signature = sig.values[0].to_bytes((n.bit_length() + 7) // 8, "big")
                key = rsa.RSAPublicNumbers(e, n).public_key()
                key.verify(signature, digest, padding.PKCS1v15(), utils.Prehashed(hash_cls()))
            elif self.algorithm == _DSA_ALGO:
                p, q, g, y = self.params
                numbers = dsa.DSAPublicNumbers(y, dsa.DSAParameterNumbers(p, q, g))
                signature = utils.encode_dss_signature(*sig.values)
                numbers.public_key().verify(signature, digest, utils.Prehashed(hash_cls()))
            else:
                raise PGPError(f"unsupported public key algorithm: {self.algorithm}")
        except InvalidSignature:
            return False
        except (ValueError, OverflowError):
            return False
        return True


def _parse_public_key(body: bytes) -> PublicKey:
    r = _Reader(body)
    version = r.u8()
    created = _timestamp(r.uint(4))
    if version in (2, 3):
        r.uint(2)
    elif version != 4:
        raise PGPError(f"unsupported public key version: {version}")
    algorithm = r.u8()
    count = _KEY_PARAM_COUNTS.get(algorithm)
    params = tuple(r.mpi() for _ in range(count)) if count is not None else ()
    if version == 4:
        fingerprint = hashlib.sha1(
            b"\x99" + len(body).to_bytes(2, "big") + body
        ).digest()
        key_id = int.from_bytes(fingerprint[-8:], "big")
    else:
        if algorithm not in _RSA_ALGOS:
            raise PGPError("version 3 keys must be RSA")
        n, e = params
        fingerprint = hashlib.md5(
            n.to_bytes((n.bit_length() + 7) // 8, "big")
            + e.to_bytes((e.bit_length() + 7) // 8, "big")
        ).digest()
        key_id = n & 0xFFFFFFFFFFFFFFFF
    return PublicKey(version, algorithm, created, key_id, fingerprint, params)


@dataclass
class Entity:
    """A primary key with its user identities and subkeys."""

    primary_key: PublicKey
    identities: list[str] = field(default_factory=list)
    subkeys: list[PublicKey] = field(default_factory=list)

    @property
    def keys(self) -> list[PublicKey]:
        return [self.primary_key, *self.subkeys]


def _digest(sig: SignatureInfo, signed: Union[bytes, BinaryIO]) -> bytes:
    if sig.hash_algo not in _HASHES:
        raise PGPError(f"unsupported hash algorithm: {sig.hash_algo}")
    h = hashlib.new(_HASHES[sig.hash_algo][0])
    if isinstance(signed, (bytes, bytearray, memoryview)):
        h.update(signed)
    else:
        for chunk in iter(lambda: signed.read(65536), b""):
            h.update(chunk)
    h.update(sig.trailer)
    return h.digest()


class KeyRing:
    """A collection of OpenPGP entities used to check signatures."""

    def __init__(self, entities=()) -> None:
        self._entities: list[Entity] = list(entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._entities)

    def __len__(self) -> int:
        return len(self._entities)

    def check_detached_signature(
        self, signed: Union[bytes, BinaryIO], signature: bytes
    ) -> Entity:
        """Verify a detached signature over ``signed`` and return the signer.

        Raises :class:`UnknownIssuerError` if no key made the signature and
        :class:`PGPError` if it does not verify.
        """
        sig = parse_signature(signature)
        candidates = [
            (entity, key)
            for entity in self._entities
            for key in entity.keys
            if sig.issuer_key_id is not None and key.key_id == sig.issuer_key_id
        ]
        if not candidates:
            raise UnknownIssuerError()
        digest = _digest(sig, signed)
        for entity, key in candidates:
            if key._verify(sig, digest):
                return entity
        raise PGPError("signature verification failed")


def _parse_key_ring(data: bytes) -> list[Entity]:
    entities: list[Entity] = []
    for tag, body in _packets(data):
        if tag == 6:
            entities.append(Entity(_parse_public_key(body)))
        elif tag in (13, 14):
            if not entities:
                raise PGPError("key ring data does not start with a public key")
            if tag == 13:
                entities[-1].identities.append(body.decode("utf-8", "replace"))
            else:
                entities[-1].subkeys.append(_parse_public_key(body))
    if not entities:
        raise PGPError("no keys found")
    return entities


def read_key_ring(stream) -> KeyRing:
    """Read an armored public key block from a stream into a key ring."""
    return KeyRing(_parse_key_ring(decode_armor(stream.read())))


def open_key_ring(*args: str) -> KeyRing:
    """Read armored key files, such as those in /etc/pki/rpm-gpg, into one ring."""
    entities: list[Entity] = []
    for path in args:
        with open(path, "rb") as f:
            entities.extend(read_key_ring(f))
    return KeyRing(entities)