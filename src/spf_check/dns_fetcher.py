"""DNS query engine: TXT lookups with per-nameserver retries and fallback."""

import logging
import time
from typing import Optional

import dns.exception
import dns.name
import dns.rdatatype
import dns.resolver

from .config import Settings
from .exceptions import (
    DnsAllResolversExhaustedError,
    DnsServfailError,
    DnsTimeoutError,
)
from .models import DnsRecord, DnsResponse, DnsStatus
from .spf_parser import is_spf_text

logger = logging.getLogger(__name__)


class DnsFetcher:
    def __init__(self, nameservers: list, timeout: float = 2.0, attempts: int = 2):
        self._nameservers = list(nameservers)
        self._timeout = timeout
        self._attempts = attempts

    def query(self, domain: str, record_type: str) -> DnsResponse:
        """Try each nameserver in order, retrying timeouts and SERVFAIL."""
        try:
            qname = dns.name.from_text(domain)
        except dns.exception.DNSException as e:
            # Malformed names cannot exist; report them like a missing domain.
            logger.debug("Unresolvable name %r: %s", domain, e)
            return DnsResponse(domain=domain, record_type=record_type, status=DnsStatus.NXDOMAIN)

        last_error: Optional[Exception] = None
        for ip in self._nameservers:
            for attempt in range(self._attempts):
                try:
                    return self._query_resolver(ip, qname, domain, record_type)
                except (DnsTimeoutError, DnsServfailError) as e:
                    last_error = e
                    logger.debug(
                        "Attempt %d/%d for %s %s via %s failed: %s",
                        attempt + 1, self._attempts, record_type, domain, ip, e,
                    )

        raise DnsAllResolversExhaustedError(
            domain, f"DNS_LOOKUP_FAILED: all resolvers failed for {record_type} {domain}: {last_error}"
        )

    def _query_resolver(self, resolver_ip: str, qname, domain: str, record_type: str) -> DnsResponse:
        resolver = dns.resolver.Resolver(configure=False)
        resolver.nameservers = [resolver_ip]
        resolver.timeout = self._timeout
        resolver.lifetime = self._timeout

        start = time.monotonic()
        try:
            rdtype = dns.rdatatype.from_text(record_type)
            answer = resolver.resolve(qname, rdtype)
            records = self._parse_records(answer, record_type)
            status = DnsStatus.NOERROR
        except dns.resolver.NXDOMAIN:
            records = []
            status = DnsStatus.NXDOMAIN
        except dns.resolver.NoAnswer:
            # Record type doesn't exist but domain does
            records = []
            status = DnsStatus.NOERROR
        except dns.exception.Timeout:
            raise DnsTimeoutError(domain, f"Timeout querying {resolver_ip} for {record_type} {domain}")
        except dns.resolver.NoNameservers:
            raise DnsServfailError(domain, f"No nameservers available for {domain}")
        except dns.exception.DNSException as e:
            raise DnsServfailError(domain, f"DNS error from {resolver_ip}: {e}")

        return DnsResponse(
            domain=domain,
            record_type=record_type,
            status=status,
            records=records,
            resolver_used=resolver_ip,
            response_time_ms=(time.monotonic() - start) * 1000,
        )

    def _parse_records(self, answer, record_type: str) -> list:
        records = []
        for rdata in answer:
            if record_type == "TXT":
                # Concatenate multi-string TXT records per RFC
                value = b"".join(rdata.strings).decode("ascii", errors="replace")
            else:
                value = str(rdata)
            records.append(DnsRecord(record_type=record_type, value=value))
        return records

    # ── Record source ──────────────────────────────────────────────────────────

    def query_txt(self, domain: str) -> DnsResponse:
        return self.query(domain, "TXT")

    def find_spf_record(self, domain: str) -> Optional[str]:
        """Return the domain's SPF TXT text, or None if it publishes none."""
        response = self.query_txt(domain)
        if response.status == DnsStatus.NXDOMAIN:
            return None

        spf_records = [r.value.strip() for r in response.records if is_spf_text(r.value)]
        if not spf_records:
            return None
        if len(spf_records) > 1:
            logger.debug("%s publishes %d SPF records; using the first", domain, len(spf_records))
        return spf_records[0]


def create_fetcher(settings: Settings) -> DnsFetcher:
    """Module-level factory used by the API and CLI."""
    return DnsFetcher(
        nameservers=settings.nameservers,
        timeout=settings.dns_timeout,
        attempts=settings.dns_attempts,
    )
