"""Access-key derived encryption for password-bearing payloads.

Passwords sent to the Edge API (cluster creation, node addition, node disk
discovery) are encrypted with a key derived from the access key secret:

- key: lowercase hex MD5 digest of the secret (32 ASCII bytes, AES-256)
- IV: the first 16 bytes of that hex string
- AES-CBC with PKCS7 padding, standard base64 output
"""

import base64
import hashlib

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ..exceptions import ParameterError

_BLOCK_BITS = 128


def _derive(secret: str):
    hex_digest = hashlib.md5(secret.encode("utf-8")).hexdigest().encode("ascii")
    return hex_digest, hex_digest[:16]


def encrypt_by_access_key(secret: str, value: str) -> str:
    """Encrypt a value with the access-key derived AES key.

    :param secret: Access key secret
    :type secret: str
    :param value: Plaintext, usually a password
    :type value: str
    :return: Base64 ciphertext
    :rtype: str
    """
    key, iv = _derive(secret)
    padder = padding.PKCS7(_BLOCK_BITS).padder()
    padded = padder.update(value.encode("utf-8")) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    encrypted = encryptor.update(padded) + encryptor.finalize()
    return base64.b64encode(encrypted).decode("ascii")


def decrypt_by_access_key(secret: str, token: str) -> str:
    """Reverse :func:`encrypt_by_access_key`.

    :param secret: Access key secret
    :type secret: str
    :param token: Base64 ciphertext
    :type token: str
    :return: Plaintext
    :rtype: str
    :raises ParameterError: If the token is not valid ciphertext for this key
    """
    key, iv = _derive(secret)
    try:
        encrypted = base64.b64decode(token, validate=True)
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(encrypted) + decryptor.finalize()
        unpadder = padding.PKCS7(_BLOCK_BITS).unpadder()
        return (unpadder.update(padded) + unpadder.finalize()).decode("utf-8")
    except ValueError as e:
        raise ParameterError(f"invalid encrypted value: {e}", field="token") from e
