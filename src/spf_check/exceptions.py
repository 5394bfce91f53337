"""Custom exception hierarchy for spf-check."""


class SpfCheckError(Exception):
    """Base exception for all spf-check errors."""


# ── Record Source Errors ───────────────────────────────────────────────────────

class RecordSourceError(SpfCheckError):
    """The record source could not answer for a domain."""

    def __init__(self, domain: str, message: str):
        self.domain = domain
        super().__init__(message)


class DnsTimeoutError(RecordSourceError):
    """DNS query timed out."""


class DnsServfailError(RecordSourceError):
    """DNS server returned SERVFAIL or another hard failure."""


class DnsAllResolversExhaustedError(RecordSourceError):
    """All configured resolvers failed to answer."""


# ── Parse Errors ───────────────────────────────────────────────────────────────

class RecordParseError(SpfCheckError):
    """Retrieved TXT text is not a valid SPF record."""

    def __init__(self, raw_text: str, reason: str):
        self.raw_text = raw_text
        self.reason = reason
        super().__init__(f"SPF_PARSE_FAILED: {reason} in {raw_text!r}")


# ── Configuration Errors ───────────────────────────────────────────────────────

class ConfigError(SpfCheckError):
    """An environment setting has an unusable value."""
