"""Identifier casing helpers for field, struct and serialized names."""

import re
from typing import List

# Go-style initialisms kept upper-case in exported identifiers.
COMMON_INITIALISMS = {
    "ACL", "API", "ASCII", "CPU", "CSS", "DNS", "EOF", "GUID", "HTML", "HTTP",
    "HTTPS", "ID", "IP", "JSON", "LHS", "QPS", "RAM", "RHS", "RPC", "SLA",
    "SMTP", "SQL", "SSH", "TCP", "TLS", "TTL", "UDP", "UI", "UID", "UUID",
    "URI", "URL", "UTF8", "VM", "XML", "XMPP", "XSRF", "XSS",
}

_DIGIT_WORDS = {
    "0": "zero", "1": "one", "2": "two", "3": "three", "4": "four",
    "5": "five", "6": "six", "7": "seven", "8": "eight", "9": "nine",
}

_WORD_RE = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z0-9]+|[0-9]+")

NAME_FORMATS = ("snake", "camel", "lower_camel", "none")


def split_words(name: str) -> List[str]:
    words: List[str] = []
    for chunk in re.split(r"[^A-Za-z0-9]+", name):
        if chunk:
            words.extend(_WORD_RE.findall(chunk))
    return words


def to_snake(name: str) -> str:
    return "_".join(word.lower() for word in split_words(name))


def to_camel(name: str) -> str:
    return "".join(word[:1].upper() + word[1:].lower() for word in split_words(name))


def to_lower_camel(name: str) -> str:
    camel = to_camel(name)
    return camel[:1].lower() + camel[1:]


def stringify_first_char(name: str) -> str:
    """Spell out a leading digit so the result can start an identifier."""
    if name and name[0] in _DIGIT_WORDS:
        return f"{_DIGIT_WORDS[name[0]]}_{name[1:]}"
    return name


def fmt_field_name(name: str) -> str:
    """Convert a column or table name into an exported identifier.

    ``user_id`` becomes ``UserID``; ``2fa_code`` becomes ``TwoFaCode``.
    """
    parts = []
    for word in split_words(stringify_first_char(name)):
        if word.upper() in COMMON_INITIALISMS:
            parts.append(word.upper())
        else:
            parts.append(word[:1].upper() + word[1:].lower())
    return "".join(parts) or "Field"


def singular(name: str) -> str:
    """Singularize the last word of a Pascal-case identifier."""
    lowered = name.lower()
    if lowered.endswith("ies") and len(name) > 3:
        return name[:-3] + ("Y" if name[-3].isupper() else "y")
    if lowered.endswith(("sses", "xes", "zes", "ches", "shes")):
        return name[:-2]
    if lowered.endswith(("ss", "us", "is")):
        return name
    if lowered.endswith("s") and len(name) > 1:
        return name[:-1]
    return name


def format_field_name(name_format: str, name: str) -> str:
    if name_format == "snake":
        return to_snake(name)
    if name_format == "camel":
        return to_camel(name)
    if name_format == "lower_camel":
        return to_lower_camel(name)
    return name
