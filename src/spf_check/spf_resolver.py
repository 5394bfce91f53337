"""SPF chain resolution: is a target domain reachable through include/redirect?

The walk is iterative and depth-first over a single stack. Each popped
domain costs one record-source lookup, and the walk stops once
``LOOKUP_BUDGET`` distinct domains have been queried.

https://datatracker.ietf.org/doc/html/rfc7208#section-4.6.4

> SPF implementations MUST limit the total number of those terms to 10
> during SPF evaluation, to avoid unreasonable load on the DNS.
"""

import logging
from typing import Optional, Protocol

from .models import CheckResult
from .spf_parser import has_all, include_targets, parse_spf_record, redirect_target

logger = logging.getLogger(__name__)

LOOKUP_BUDGET = 10


class RecordSource(Protocol):
    def find_spf_record(self, domain: str) -> Optional[str]:
        """Return SPF text for *domain*, None if absent; raise RecordSourceError on failure."""
        ...


def normalize_domain(domain: str) -> str:
    """Canonical key for a domain: trimmed, lowercased, no trailing dot."""
    domain = domain.strip().lower()
    if domain.endswith("."):
        domain = domain[:-1]
    return domain


class SpfChainResolver:
    def __init__(self, source: RecordSource):
        self._source = source

    def resolve(self, root: str, target: str) -> CheckResult:
        """Walk the SPF chain from *root* looking for an include of *target*.

        Raises RecordSourceError / RecordParseError unchanged; running out of
        lookup budget or meeting a domain without SPF is a normal outcome.
        """
        root_key = normalize_domain(root)
        target_key = normalize_domain(target)

        to_visit = [root_key]
        visited: set = set()
        visited_order: list = []
        root_record_text: Optional[str] = None
        included_domains: list = []
        budget_exhausted = False

        while to_visit:
            if len(visited) >= LOOKUP_BUDGET:
                budget_exhausted = True
                logger.info(
                    "Maximum DNS lookup limit of %d reached. Visited domains: %s",
                    LOOKUP_BUDGET, visited_order,
                )
                break

            current = to_visit.pop()
            if current in visited:
                continue
            visited.add(current)
            visited_order.append(current)

            spf_text = self._source.find_spf_record(current)
            if spf_text is None:
                logger.debug("No SPF record for %s", current)
                continue

            record = parse_spf_record(spf_text)
            if current == root_key:
                root_record_text = spf_text

            includes = include_targets(record)
            included_domains.extend(includes)
            logger.debug("%s includes %s", current, includes)

            include_keys = [normalize_domain(d) for d in includes]
            if target_key in include_keys:
                return self._result(
                    True, visited_order, root_record_text, included_domains, budget_exhausted
                )

            # https://datatracker.ietf.org/doc/html/rfc7208#section-6.1
            # Any "redirect" modifier MUST be ignored if there is an "all"
            # mechanism anywhere in the record.
            redirect = redirect_target(record)
            if redirect and not has_all(record):
                to_visit.append(normalize_domain(redirect))

            # Pushed last so includes are popped before the redirect.
            to_visit.extend(include_keys)

        return self._result(False, visited_order, root_record_text, included_domains, budget_exhausted)

    @staticmethod
    def _result(found, visited_order, root_record_text, included_domains, budget_exhausted) -> CheckResult:
        return CheckResult(
            found=found,
            visited_count=len(visited_order),
            root_record_text=root_record_text,
            included_domains=list(included_domains),
            visited_domains=list(visited_order),
            budget_exhausted=budget_exhausted,
        )
