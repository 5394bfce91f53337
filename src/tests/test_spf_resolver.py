"""Unit tests for SpfChainResolver: traversal order, budget, cycles, errors."""

import pytest

from spf_check.exceptions import DnsTimeoutError, RecordParseError
from spf_check.spf_resolver import LOOKUP_BUDGET, SpfChainResolver, normalize_domain

from .helpers import mock_source, queried

ROOT = "example.com"
TARGET = "mail.easybill.de"


def resolve(mapping, root=ROOT, target=TARGET):
    source = mock_source(mapping)
    return SpfChainResolver(source).resolve(root, target), source


class TestDirectMatch:
    def test_target_in_first_record(self):
        record = "v=spf1 include:mail.easybill.de ~all"
        result, _ = resolve({ROOT: record})
        assert result.found
        assert result.visited_count == 1
        assert result.root_record_text == record
        assert result.included_domains == [TARGET]

    def test_match_stops_before_remaining_frontier(self):
        result, source = resolve({ROOT: "v=spf1 include:a.example.com include:mail.easybill.de -all"})
        assert result.found
        assert queried(source) == [ROOT]

    def test_match_is_case_insensitive(self):
        result, _ = resolve({ROOT: "v=spf1 include:Mail.EasyBill.de. -all"})
        assert result.found
        assert result.included_domains == ["Mail.EasyBill.de."]


class TestMiss:
    def test_target_not_in_first_record(self):
        root = "_spf.example.com"
        result, _ = resolve({root: "v=spf1 include:mail.easybill.de ~all"}, root=root, target="mail.other.com")
        assert not result.found
        assert result.visited_count == 2
        assert result.root_record_text == "v=spf1 include:mail.easybill.de ~all"
        assert result.included_domains == ["mail.easybill.de"]

    def test_root_without_record(self):
        result, _ = resolve({})
        assert not result.found
        assert result.visited_count == 1
        assert result.root_record_text is None
        assert result.included_domains == []

    def test_root_record_text_only_from_root(self):
        result, _ = resolve({"other.com": "v=spf1 -all"})
        assert result.root_record_text is None


class TestRedirect:
    def test_target_in_redirected_record(self):
        result, _ = resolve({
            ROOT: "v=spf1 redirect=spf.easybill-mail.de",
            "spf.easybill-mail.de": "v=spf1 include:mail.easybill.de ~all",
        })
        assert result.found
        assert result.visited_count == 2
        assert result.root_record_text == "v=spf1 redirect=spf.easybill-mail.de"
        assert result.included_domains == [TARGET]

    def test_target_not_in_redirected_record(self):
        result, _ = resolve({
            ROOT: "v=spf1 redirect=spf.easybill-mail.de",
            "spf.easybill-mail.de": "v=spf1 include:mail.easybill.de ~all",
        }, target="other.com")
        assert not result.found
        assert result.visited_count == 3
        assert result.included_domains == ["mail.easybill.de"]

    def test_redirect_suppressed_by_all(self):
        result, source = resolve({
            ROOT: "v=spf1 all redirect=spf.other.com",
            "spf.other.com": "v=spf1 include:mail.easybill.de -all",
        })
        assert not result.found
        assert result.visited_count == 1
        assert "spf.other.com" not in queried(source)

    def test_qualified_all_also_suppresses_redirect(self):
        result, source = resolve({
            ROOT: "v=spf1 redirect=spf.other.com -all",
            "spf.other.com": "v=spf1 include:mail.easybill.de -all",
        })
        assert not result.found
        assert queried(source) == [ROOT]

    def test_includes_evaluated_before_redirect(self):
        _, source = resolve({
            ROOT: "v=spf1 redirect=r.example.com include:a.example.com include:b.example.com",
        }, target="nowhere.example.com")
        assert queried(source) == [ROOT, "b.example.com", "a.example.com", "r.example.com"]


class TestTraversalOrder:
    def test_depth_first(self):
        _, source = resolve({
            ROOT: "v=spf1 include:a.example.com include:b.example.com -all",
            "b.example.com": "v=spf1 include:b1.example.com -all",
        }, target="nowhere.example.com")
        assert queried(source) == [ROOT, "b.example.com", "b1.example.com", "a.example.com"]

    def test_included_domains_accumulate_with_duplicates(self):
        result, _ = resolve({
            ROOT: "v=spf1 include:a.example.com include:shared.example.com -all",
            "a.example.com": "v=spf1 include:shared.example.com -all",
        }, target="nowhere.example.com")
        assert result.included_domains.count("shared.example.com") == 2
        assert result.visited_count == 3


class TestCycles:
    def test_mutual_include_terminates(self):
        result, source = resolve({
            "a.example.com": "v=spf1 include:b.example.com -all",
            "b.example.com": "v=spf1 include:a.example.com -all",
        }, root="a.example.com", target="nowhere.example.com")
        assert not result.found
        assert result.visited_count == 2
        assert queried(source) == ["a.example.com", "b.example.com"]

    def test_self_include_queried_once(self):
        result, source = resolve({ROOT: "v=spf1 include:example.com -all"}, target="nowhere.example.com")
        assert result.visited_count == 1
        assert source.find_spf_record.call_count == 1

    def test_spellings_of_same_name_are_one_node(self):
        result, _ = resolve({
            ROOT: "v=spf1 include:A.example.com include:a.example.com. -all",
        }, target="nowhere.example.com")
        assert result.visited_count == 2


class TestBudget:
    def _chain(self, length):
        mapping = {ROOT: "v=spf1 include:d1.example.com -all"}
        for i in range(1, length):
            mapping[f"d{i}.example.com"] = f"v=spf1 include:d{i + 1}.example.com -all"
        return mapping

    def test_long_chain_capped_at_budget(self):
        result, source = resolve(self._chain(15), target="d15.example.com")
        assert not result.found
        assert result.visited_count <= LOOKUP_BUDGET
        assert source.find_spf_record.call_count == LOOKUP_BUDGET
        assert result.budget_exhausted

    def test_target_within_budget_found(self):
        result, _ = resolve(self._chain(15), target="d5.example.com")
        assert result.found
        assert not result.budget_exhausted

    def test_wide_fanout_capped_at_budget(self):
        record = "v=spf1 " + " ".join(f"include:s{i}.example.com" for i in range(20)) + " -all"
        result, source = resolve({ROOT: record}, target="nowhere.example.com")
        assert result.visited_count == LOOKUP_BUDGET
        assert source.find_spf_record.call_count == LOOKUP_BUDGET
        assert len(result.included_domains) == 20

    def test_short_chain_not_exhausted(self):
        result, _ = resolve({ROOT: "v=spf1 -all"})
        assert not result.budget_exhausted


class TestErrors:
    def test_record_source_failure_propagates(self):
        error = DnsTimeoutError("a.example.com", "timeout")
        with pytest.raises(DnsTimeoutError) as exc_info:
            resolve({ROOT: "v=spf1 include:a.example.com -all", "a.example.com": error})
        assert exc_info.value.domain == "a.example.com"

    def test_malformed_record_propagates(self):
        with pytest.raises(RecordParseError) as exc_info:
            resolve({ROOT: "v=spf1 include:a.example.com -all", "a.example.com": "v=spf1 bogus:x -all"})
        assert exc_info.value.raw_text == "v=spf1 bogus:x -all"

    def test_error_at_root_propagates(self):
        with pytest.raises(RecordParseError):
            resolve({ROOT: "v=spf1 include: -all"})


class TestIdempotence:
    def test_repeated_calls_identical(self):
        source = mock_source({
            ROOT: "v=spf1 redirect=spf.example.net",
            "spf.example.net": "v=spf1 include:a.example.net include:b.example.net ~all",
        })
        resolver = SpfChainResolver(source)
        first = resolver.resolve(ROOT, "nowhere.example.com")
        second = resolver.resolve(ROOT, "nowhere.example.com")
        assert first == second


class TestNormalizeDomain:
    def test_lowercases_and_strips_trailing_dot(self):
        assert normalize_domain(" Example.COM. ") == "example.com"

    def test_leaves_plain_name_alone(self):
        assert normalize_domain("_spf.example.com") == "_spf.example.com"
