import base64
import binascii
import os

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.padding import PKCS7

from .errors import FormatError, InvalidKeyError, NoSecretKeyError, PaddingError
from .keys import Pair, PublicKey, derive_shared_secret
from .utils import decode_utf8, encode_utf8

BLOCK_SIZE = 16
IV_SIZE = 16
KEY_SIZE = 32


def _cipher(secret: bytes, iv: bytes) -> Cipher:
    if len(secret) != KEY_SIZE:
        raise InvalidKeyError(f"AES-256 key must be {KEY_SIZE} bytes, got {len(secret)}")
    if len(iv) != IV_SIZE:
        raise FormatError(f"IV must be {IV_SIZE} bytes, got {len(iv)}")
    return Cipher(algorithms.AES(secret), modes.CBC(iv))


def encrypt(secret: bytes, iv: bytes, plaintext: bytes) -> bytes:
    """AES-256-CBC with PKCS7 padding."""
    padder = PKCS7(128).padder()
    padded = padder.update(plaintext) + padder.finalize()

    enc = _cipher(secret, iv).encryptor()
    return enc.update(padded) + enc.finalize()


def decrypt(secret: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    """
    Reverse of encrypt. There is no MAC: corrupted ciphertext that still
    ends in valid padding decrypts to garbage.
    """
    if len(ciphertext) % BLOCK_SIZE != 0:
        raise PaddingError(f"ciphertext length {len(ciphertext)} is not a multiple of {BLOCK_SIZE}")

    dec = _cipher(secret, iv).decryptor()
    padded = dec.update(ciphertext) + dec.finalize()

    unpadder = PKCS7(128).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise PaddingError("invalid PKCS7 padding") from exc


def _shared_key(pair: Pair, their_public: PublicKey) -> bytes:
    if pair.secret_key is None:
        raise NoSecretKeyError()
    return derive_shared_secret(pair.secret_key, their_public)


def encrypt_content(pair: Pair, their_public: PublicKey, plaintext: str, iv: bytes | None = None) -> str:
    """
    Returns: base64(ciphertext)?iv=base64(iv)
    """
    key = _shared_key(pair, their_public)
    iv = iv if iv is not None else os.urandom(IV_SIZE)
    ct = encrypt(key, iv, encode_utf8(plaintext, "NIP-04 plaintext"))

    b64_ct = base64.b64encode(ct).decode("ascii")
    b64_iv = base64.b64encode(iv).decode("ascii")
    return f"{b64_ct}?iv={b64_iv}"


def decrypt_content(pair: Pair, their_public: PublicKey, content: str) -> str:
    if "?iv=" not in content:
        raise FormatError("Invalid NIP-04 content (missing ?iv=)")

    b64_ct, b64_iv = content.split("?iv=", 1)
    try:
        ct = base64.b64decode(b64_ct, validate=True)
        iv = base64.b64decode(b64_iv, validate=True)
    except binascii.Error as exc:
        raise FormatError("Invalid NIP-04 content (bad base64)") from exc
    if len(iv) != IV_SIZE:
        raise FormatError(f"Invalid NIP-04 content (iv must be {IV_SIZE} bytes)")

    key = _shared_key(pair, their_public)
    return decode_utf8(decrypt(key, iv, ct), "NIP-04 plaintext")
