"""Shared test factories for mock record sources and dnspython answers."""

from unittest.mock import MagicMock


def mock_source(mapping=None):
    """
    Build a mock record source whose find_spf_record() answers from `mapping`.

    mapping: dict of domain -> SPF text, or an Exception instance to raise.
    Unknown domains have no SPF record.
    """
    mapping = mapping or {}
    source = MagicMock()

    def _find_spf_record(domain):
        val = mapping.get(domain)
        if isinstance(val, Exception):
            raise val
        return val

    source.find_spf_record.side_effect = _find_spf_record
    return source


def queried(source):
    """Domains passed to find_spf_record, in call order."""
    return [c.args[0] for c in source.find_spf_record.call_args_list]


def txt_answer(*values):
    """Fake dnspython Answer: iterable of rdata with .strings."""
    rdatas = []
    for value in values:
        chunks = value if isinstance(value, (list, tuple)) else [value]
        rdata = MagicMock()
        rdata.strings = [c.encode("ascii") for c in chunks]
        rdatas.append(rdata)

    answer = MagicMock()
    answer.__iter__.side_effect = lambda: iter(rdatas)
    return answer
