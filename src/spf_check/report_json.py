"""JSON serializer for the /api/v1/check-spf response body."""

import json

from .models import CheckResult


class JsonReporter:
    def render(self, result: CheckResult, domain: str, target: str, elapsed_ms: int) -> str:
        return json.dumps(self.to_dict(result, domain, target, elapsed_ms), indent=2)

    def to_dict(self, result: CheckResult, domain: str, target: str, elapsed_ms: int) -> dict:
        return {
            "found": result.found,
            "checked_domains": result.visited_count,
            "domain": domain,
            "target": target,
            "elapsed_ms": elapsed_ms,
            "has_spf_record": result.root_record_text is not None,
            "spf_record": result.root_record_text,
            "included_domains": list(result.included_domains),
        }
