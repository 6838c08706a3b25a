from node_reconciler.core.types import Fact
from node_reconciler.transform import squash_facts


def test_squash_builds_document_keyed_by_fact_name():
    facts = [Fact("os", "linux"), Fact("kernel", "6.1"), Fact("cores", 8)]

    doc = squash_facts("h1", facts)

    assert doc.name == "h1"
    assert doc.certname == "h1"
    assert doc.facts == {"os": "linux", "kernel": "6.1", "cores": 8}


def test_squash_keeps_one_entry_per_fact_name():
    facts = [Fact("os", "linux"), Fact("os", "debian")]

    doc = squash_facts("h1", facts)

    assert doc.facts == {"os": "debian"}


def test_squash_empty_fact_list_gives_empty_facts():
    doc = squash_facts("ghost", [])

    assert doc.to_payload() == {"name": "ghost", "certname": "ghost", "facts": {}}
