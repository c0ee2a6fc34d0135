from __future__ import annotations

import pytest

from bloom.services.analysis_engine import (
    CoreFeeling,
    DEFAULT_TAXONOMY,
    FeelingSelection,
    FeelingTaxonomy,
    SpecificFeeling,
)
from bloom.services.analysis_engine.models import DEFAULT_VALENCE


def test_default_wheel_shape():
    assert DEFAULT_TAXONOMY.core_ids == ["joy", "love", "peace", "surprise", "sadness", "fear", "anger"]
    assert DEFAULT_TAXONOMY.size == 7
    for core_id in DEFAULT_TAXONOMY.core_ids:
        assert DEFAULT_TAXONOMY.specifics_for(core_id)
        assert core_id in DEFAULT_VALENCE


def test_every_specific_belongs_to_one_core():
    seen = set()
    for core in DEFAULT_TAXONOMY.cores():
        for sp in DEFAULT_TAXONOMY.specifics_for(core.id):
            assert sp.core_id == core.id
            assert sp.id not in seen
            seen.add(sp.id)


def test_belongs_to_and_well_formed():
    assert DEFAULT_TAXONOMY.belongs_to("proud", "joy")
    assert not DEFAULT_TAXONOMY.belongs_to("proud", "sadness")
    assert not DEFAULT_TAXONOMY.belongs_to("nope", "joy")
    assert DEFAULT_TAXONOMY.is_well_formed(FeelingSelection("fear", "anxious"))
    assert not DEFAULT_TAXONOMY.is_well_formed(FeelingSelection("fear", "calm"))


def test_sadness_valence_below_joy():
    assert DEFAULT_VALENCE["sadness"] < DEFAULT_VALENCE["joy"]


def test_to_dict_lists_cores_in_order():
    d = DEFAULT_TAXONOMY.to_dict()
    assert [c["id"] for c in d["core_feelings"]] == DEFAULT_TAXONOMY.core_ids
    joy = d["core_feelings"][0]
    assert joy["name"] == "Joy"
    assert {"id": "proud", "name": "Proud"} in joy["specific_feelings"]


def test_rejects_specific_filed_under_other_core():
    with pytest.raises(ValueError):
        FeelingTaxonomy([(CoreFeeling("a", "A", "#000"), [SpecificFeeling("x", "X", "b")])])


def test_rejects_duplicate_core():
    core = CoreFeeling("a", "A", "#000")
    with pytest.raises(ValueError):
        FeelingTaxonomy([(core, []), (core, [])])
