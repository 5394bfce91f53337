"""Shared data contracts between all spf-check modules. Zero logic here."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


# ── Enums ──────────────────────────────────────────────────────────────────────

class MechanismKind(Enum):
    INCLUDE = "include"
    REDIRECT = "redirect"
    ALL = "all"
    OTHER = "other"


class SpfQualifier(Enum):
    PASS = "+"
    FAIL = "-"
    SOFTFAIL = "~"
    NEUTRAL = "?"


class DnsStatus(Enum):
    NOERROR = "NOERROR"
    NXDOMAIN = "NXDOMAIN"
    SERVFAIL = "SERVFAIL"
    TIMEOUT = "TIMEOUT"


# ── DNS Layer ──────────────────────────────────────────────────────────────────

@dataclass
class DnsRecord:
    record_type: str
    value: str


@dataclass
class DnsResponse:
    domain: str
    record_type: str
    status: DnsStatus
    records: list = field(default_factory=list)  # list[DnsRecord]
    resolver_used: str = ""
    response_time_ms: float = 0.0


# ── SPF Layer ──────────────────────────────────────────────────────────────────

@dataclass
class SpfMechanism:
    order: int
    raw: str
    kind: MechanismKind
    name: str
    qualifier: Optional[SpfQualifier] = None     # None for modifiers
    argument: Optional[str] = None
    target_domain: Optional[str] = None          # set for include / redirect


@dataclass
class SpfRecord:
    raw_text: str
    mechanisms: list = field(default_factory=list)  # list[SpfMechanism]


# ── Chain Resolution ───────────────────────────────────────────────────────────

@dataclass
class CheckResult:
    found: bool
    visited_count: int
    root_record_text: Optional[str] = None
    included_domains: list = field(default_factory=list)  # list[str], may repeat
    visited_domains: list = field(default_factory=list)   # list[str], query order
    budget_exhausted: bool = False
