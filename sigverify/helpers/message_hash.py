"""
Personal-message hashing (EIP-191 version 0x45).

    digest = keccak256("\\x19Ethereum Signed Message:\\n" + len(message) + message)

where len(message) is the decimal byte length written in ASCII. Text is
UTF-8 encoded before hashing, the same way ``personal_sign`` wallets and
ethers' ``hashMessage`` treat strings.
"""

from typing import Union

from eth_account.messages import SignableMessage
from eth_utils import keccak

from ..datatypes import Digest

PERSONAL_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n"

MessageLike = Union[bytes, bytearray, memoryview, str, SignableMessage]


def hash_message(message: MessageLike) -> Digest:
    """
    Compute the digest a wallet signs for ``message``.

    Args:
        message: Raw bytes, text, or an already wrapped EIP-191
                 ``SignableMessage`` (e.g. from ``encode_typed_data``)

    Returns:
        32-byte Digest

    Raises:
        TypeError: If message is of an unsupported type
    """
    if isinstance(message, SignableMessage):
        return Digest(keccak(b"\x19" + message.version + message.header + message.body))
    if isinstance(message, str):
        message = message.encode("utf-8")
    if not isinstance(message, (bytes, bytearray, memoryview)):
        raise TypeError(f"Cannot hash message of type {type(message).__name__}")

    data = bytes(message)
    length = str(len(data)).encode("ascii")
    return Digest(keccak(PERSONAL_MESSAGE_PREFIX + length + data))
