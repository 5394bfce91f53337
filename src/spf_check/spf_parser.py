"""SPF record tokenizer: turns raw TXT text into an ordered list of mechanisms."""

import re

from .exceptions import RecordParseError
from .models import MechanismKind, SpfMechanism, SpfQualifier, SpfRecord

VERSION_TAG = "v=spf1"
KNOWN_MECHANISMS = {"all", "include", "a", "mx", "ptr", "ip4", "ip6", "exists"}
DOMAIN_REQUIRED = {"include", "exists"}
SINGLE_USE_MODIFIERS = {"redirect", "exp"}

_MODIFIER_NAME = re.compile(r"^[a-zA-Z][a-zA-Z0-9_.\-]*$")


def is_spf_text(txt: str) -> bool:
    """True if a TXT string carries an SPF version tag."""
    tokens = txt.strip().split(maxsplit=1)
    return bool(tokens) and tokens[0].lower() == VERSION_TAG


def parse_spf_record(raw_text: str) -> SpfRecord:
    """Parse *raw_text* into an SpfRecord. Raises RecordParseError when malformed."""
    if not is_spf_text(raw_text):
        raise RecordParseError(raw_text, "missing v=spf1 version tag")

    tokens = raw_text.strip().split()[1:]
    mechanisms = []
    seen_modifiers: set = set()

    for i, token in enumerate(tokens, start=1):
        mechanism = _parse_term(raw_text, i, token)
        if mechanism.qualifier is None:
            if mechanism.name in SINGLE_USE_MODIFIERS and mechanism.name in seen_modifiers:
                raise RecordParseError(raw_text, f"{mechanism.name}= appears more than once")
            seen_modifiers.add(mechanism.name)
        mechanisms.append(mechanism)

    return SpfRecord(raw_text=raw_text, mechanisms=mechanisms)


def _parse_term(raw_text: str, order: int, token: str) -> SpfMechanism:
    if token[0] in "+-~?":
        qualifier_char = token[0]
        rest = token[1:]
    else:
        qualifier_char = None
        rest = token

    # Modifier: name=value, never qualified
    name, sep, value = rest.partition("=")
    if sep and _MODIFIER_NAME.match(name) and name.lower() not in KNOWN_MECHANISMS:
        if qualifier_char is not None:
            raise RecordParseError(raw_text, f"qualifier on modifier {token!r}")
        name = name.lower()
        if name in SINGLE_USE_MODIFIERS and not value:
            raise RecordParseError(raw_text, f"empty {name}= modifier")
        if name == "redirect":
            return SpfMechanism(
                order=order,
                raw=token,
                kind=MechanismKind.REDIRECT,
                name=name,
                argument=value,
                target_domain=value,
            )
        return SpfMechanism(order=order, raw=token, kind=MechanismKind.OTHER, name=name, argument=value)

    qualifier = _char_to_qualifier(qualifier_char or "+")

    # Mechanism: name[:argument][/cidr]
    if ":" in rest:
        name, argument = rest.split(":", 1)
    elif "/" in rest:
        name, cidr = rest.split("/", 1)
        argument = "/" + cidr
    else:
        name, argument = rest, None

    name = name.lower()
    if name not in KNOWN_MECHANISMS:
        raise RecordParseError(raw_text, f"unknown mechanism {token!r}")
    if name in DOMAIN_REQUIRED and not argument:
        raise RecordParseError(raw_text, f"{name} without a domain")
    if name == "all":
        if argument is not None:
            raise RecordParseError(raw_text, f"all takes no argument: {token!r}")
        return SpfMechanism(order=order, raw=token, kind=MechanismKind.ALL, name=name, qualifier=qualifier)
    if name == "include":
        return SpfMechanism(
            order=order,
            raw=token,
            kind=MechanismKind.INCLUDE,
            name=name,
            qualifier=qualifier,
            argument=argument,
            target_domain=argument,
        )

    return SpfMechanism(
        order=order,
        raw=token,
        kind=MechanismKind.OTHER,
        name=name,
        qualifier=qualifier,
        argument=argument,
    )


# ── Helpers ────────────────────────────────────────────────────────────────────

def _char_to_qualifier(char: str) -> SpfQualifier:
    return {
        "+": SpfQualifier.PASS,
        "-": SpfQualifier.FAIL,
        "~": SpfQualifier.SOFTFAIL,
        "?": SpfQualifier.NEUTRAL,
    }.get(char, SpfQualifier.PASS)


def include_targets(record: SpfRecord) -> list:
    """Domains named by include mechanisms, in record order."""
    return [m.target_domain for m in record.mechanisms if m.kind == MechanismKind.INCLUDE]


def has_all(record: SpfRecord) -> bool:
    return any(m.kind == MechanismKind.ALL for m in record.mechanisms)


def redirect_target(record: SpfRecord):
    """Domain named by redirect=, or None when absent."""
    for m in record.mechanisms:
        if m.kind == MechanismKind.REDIRECT:
            return m.target_domain
    return None
