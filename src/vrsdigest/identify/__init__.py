"""Digest Engine and Identifier Assigner.

- ga4gh_digest: digest of one record's canonical form
- ga4gh_identify: identifier of one addressable record
- identify: identifiers injected throughout a record tree
- identify_all: identify independent records, optionally in parallel
"""

from vrsdigest.identify.assigner import identify, identify_all
from vrsdigest.identify.digests import ga4gh_digest, ga4gh_identify

__all__ = [
    "ga4gh_digest",
    "ga4gh_identify",
    "identify",
    "identify_all",
]
