"""Text encoding used by PlantUML servers in diagram URLs.

The diagram source is UTF-8 encoded, compressed with raw deflate (no zlib
header or checksum) and then written in a base64-like alphabet that differs
from standard base64 in its character order:

    0-9 A-Z a-z - _

Every group of 3 bytes becomes 4 characters. A trailing group of 1 or 2
bytes is padded with zero bytes and also becomes 4 characters; the server's
inflater stops at the end of the deflate stream, so the padding is ignored.
"""

import logging
import zlib

from puml_export.core.errors import EncodingError

logger = logging.getLogger(__name__)

PLANTUML_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-_"

_CHAR_VALUES = {char: index for index, char in enumerate(PLANTUML_ALPHABET)}

COMPRESSION_LEVEL = 9


def deflate(data: bytes) -> bytes:
    compressor = zlib.compressobj(COMPRESSION_LEVEL, zlib.DEFLATED, -zlib.MAX_WBITS)
    return compressor.compress(data) + compressor.flush()


def inflate(data: bytes) -> bytes:
    decompressor = zlib.decompressobj(-zlib.MAX_WBITS)
    result = decompressor.decompress(data) + decompressor.flush()
    if not decompressor.eof:
        raise EncodingError("Compressed diagram data is truncated")
    return result


def encode_bytes(data: bytes) -> str:
    """Encode bytes with the PlantUML alphabet."""
    chars = []
    for i in range(0, len(data), 3):
        group = data[i : i + 3].ljust(3, b"\0")
        b1, b2, b3 = group
        chars.append(PLANTUML_ALPHABET[b1 >> 2])
        chars.append(PLANTUML_ALPHABET[((b1 & 0x3) << 4) | (b2 >> 4)])
        chars.append(PLANTUML_ALPHABET[((b2 & 0xF) << 2) | (b3 >> 6)])
        chars.append(PLANTUML_ALPHABET[b3 & 0x3F])
    return "".join(chars)


def decode_bytes(token: str) -> bytes:
    """Decode a PlantUML-alphabet string back to bytes.

    The result includes any zero bytes that padded the final group.

    Raises:
        EncodingError: If the token has an invalid length or character
    """
    if len(token) % 4 != 0:
        raise EncodingError(f"Token length must be a multiple of 4, got {len(token)}")
    result = bytearray()
    for i in range(0, len(token), 4):
        try:
            c1, c2, c3, c4 = (_CHAR_VALUES[char] for char in token[i : i + 4])
        except KeyError as e:
            raise EncodingError(f"Invalid character in token: {e.args[0]!r}") from None
        result.append((c1 << 2) | (c2 >> 4))
        result.append(((c2 & 0xF) << 4) | (c3 >> 2))
        result.append(((c3 & 0x3) << 6) | c4)
    return bytes(result)


def encode_plantuml(text: str) -> str:
    """Encode diagram source text as a URL path token.

    Args:
        text: PlantUML diagram source

    Returns:
        Token that a PlantUML server decodes back to `text`

    Raises:
        EncodingError: If the text cannot be encoded or compressed
    """
    try:
        data = text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Diagram text is not valid Unicode: {e}") from e
    try:
        compressed = deflate(data)
    except zlib.error as e:
        raise EncodingError(f"Could not compress diagram text: {e}") from e
    token = encode_bytes(compressed)
    logger.debug(f"Encoded {len(data)} bytes of diagram text into {len(token)} characters")
    return token


def decode_plantuml(token: str) -> str:
    """Recover diagram source text from a token created by `encode_plantuml`.

    Raises:
        EncodingError: If the token is malformed
    """
    compressed = decode_bytes(token)
    try:
        data = inflate(compressed)
    except zlib.error as e:
        raise EncodingError(f"Could not decompress diagram data: {e}") from e
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(f"Decoded diagram text is not valid UTF-8: {e}") from e
