"""
Fact reshaping.

The configuration database reports facts as a list of name and value pairs.
The provisioning service wants one flat object keyed by fact name.
"""

from __future__ import annotations

from typing import Iterable

from node_reconciler.core.types import Fact, FactDocument


def squash_facts(host: str, facts: Iterable[Fact]) -> FactDocument:
    """
    Build the upload document for one host.

    When a fact name repeats, the last value wins.
    """
    doc = FactDocument(name=host, certname=host)
    for fact in facts:
        doc.facts[fact.name] = fact.value
    return doc
