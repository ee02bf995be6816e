import re
import unicodedata
from urllib.parse import quote

from unidecode import unidecode

RE_CONTROL = re.compile(r"[\x00-\x1f\x7f]")

# Characters left unescaped when encoding a single query component / a whole URI.
COMPONENT_SAFE = "!*'()"
URI_SAFE = COMPONENT_SAFE + ";,/?:@&=+$#"


def strip_control_chars(s: str) -> str:
    """Remove ASCII control characters (0x00-0x1F, 0x7F)."""
    return RE_CONTROL.sub("", s)


def encode_component(s: str) -> str:
    """Percent-encode a single query string value."""
    return quote(s, safe=COMPONENT_SAFE)


def encode_uri(s: str) -> str:
    """Percent-encode leaving reserved URI characters untouched."""
    return quote(s, safe=URI_SAFE)


def nfc(s: str) -> str:
    return unicodedata.normalize("NFC", s)


def nfkc(s: str) -> str:
    return unicodedata.normalize("NFKC", s)


def candidate_encodings(title: str) -> list[str]:
    """Return encoded variants of a title, most compatible first.

    The catalog indexes titles inconsistently across Unicode normalization
    forms, so lookups walk this list until one variant matches.
    """
    clean = strip_control_chars(title)
    return [
        encode_component(clean),
        encode_component(nfc(clean)),
        encode_component(nfkc(nfc(clean))),
        encode_uri(clean),
        encode_component(unidecode(nfkc(clean))),
    ]
