"""spf-check: find out whether a domain's SPF chain authorizes a target domain."""

__version__ = "0.1.0"
