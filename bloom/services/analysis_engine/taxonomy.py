"""Feelings wheel reference data.

Two tiers: a small fixed set of core feelings (the hub) and the specific
feelings nested under each of them (the spokes). Display order of the core
feelings is the order every sparse mapping in a snapshot follows.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Tuple, Any

from .models import CoreFeeling, SpecificFeeling, FeelingSelection

_WHEEL: List[Tuple[CoreFeeling, List[Tuple[str, str]]]] = [
    (CoreFeeling("joy", "Joy", "#F59E0B"), [
        ("happy", "Happy"), ("proud", "Proud"), ("excited", "Excited"),
        ("hopeful", "Hopeful"), ("playful", "Playful"), ("confident", "Confident"),
    ]),
    (CoreFeeling("love", "Love", "#EC4899"), [
        ("affirmed", "Affirmed"), ("grateful", "Grateful"), ("connected", "Connected"),
        ("accepted", "Accepted"), ("tender", "Tender"),
    ]),
    (CoreFeeling("peace", "Peace", "#10B981"), [
        ("calm", "Calm"), ("content", "Content"), ("relieved", "Relieved"),
        ("safe", "Safe"), ("rested", "Rested"),
    ]),
    (CoreFeeling("surprise", "Surprise", "#8B5CF6"), [
        ("amazed", "Amazed"), ("curious", "Curious"), ("confused", "Confused"),
        ("startled", "Startled"),
    ]),
    (CoreFeeling("sadness", "Sadness", "#3B82F6"), [
        ("lonely", "Lonely"), ("hurt", "Hurt"), ("disappointed", "Disappointed"),
        ("tired", "Tired"), ("grieving", "Grieving"),
    ]),
    (CoreFeeling("fear", "Fear", "#6B7280"), [
        ("anxious", "Anxious"), ("insecure", "Insecure"), ("overwhelmed", "Overwhelmed"),
        ("worried", "Worried"), ("dysphoric", "Dysphoric"),
    ]),
    (CoreFeeling("anger", "Anger", "#EF4444"), [
        ("frustrated", "Frustrated"), ("irritated", "Irritated"), ("resentful", "Resentful"),
        ("invalidated", "Invalidated"),
    ]),
]


class FeelingTaxonomy:
    def __init__(self, wheel: Iterable[Tuple[CoreFeeling, Iterable[SpecificFeeling]]]):
        self._cores: Dict[str, CoreFeeling] = {}
        self._specifics: Dict[str, SpecificFeeling] = {}
        self._by_core: Dict[str, List[SpecificFeeling]] = {}
        for core, specifics in wheel:
            if core.id in self._cores:
                raise ValueError(f"duplicate core feeling: {core.id}")
            self._cores[core.id] = core
            self._by_core[core.id] = []
            for sp in specifics:
                if sp.core_id != core.id:
                    raise ValueError(f"specific feeling {sp.id} is not under {core.id}")
                if sp.id in self._specifics:
                    raise ValueError(f"duplicate specific feeling: {sp.id}")
                self._specifics[sp.id] = sp
                self._by_core[core.id].append(sp)

    @property
    def size(self) -> int:
        return len(self._cores)

    @property
    def core_ids(self) -> List[str]:
        return list(self._cores.keys())

    def cores(self) -> List[CoreFeeling]:
        return list(self._cores.values())

    def core(self, core_id: str) -> Optional[CoreFeeling]:
        return self._cores.get(core_id)

    def specific(self, specific_id: str) -> Optional[SpecificFeeling]:
        return self._specifics.get(specific_id)

    def specifics_for(self, core_id: str) -> List[SpecificFeeling]:
        return list(self._by_core.get(core_id, []))

    def belongs_to(self, specific_id: str, core_id: str) -> bool:
        sp = self._specifics.get(specific_id)
        return sp is not None and sp.core_id == core_id

    def is_well_formed(self, selection: FeelingSelection) -> bool:
        return self.belongs_to(selection.specific_id, selection.core_id)

    def name_of(self, core_id: str) -> str:
        core = self._cores.get(core_id)
        return core.name if core else core_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "core_feelings": [
                {
                    "id": c.id,
                    "name": c.name,
                    "color": c.color,
                    "specific_feelings": [
                        {"id": s.id, "name": s.name} for s in self._by_core[c.id]
                    ],
                }
                for c in self._cores.values()
            ]
        }


def _build_default() -> FeelingTaxonomy:
    wheel = []
    for core, spokes in _WHEEL:
        wheel.append((core, [SpecificFeeling(sid, name, core.id) for sid, name in spokes]))
    return FeelingTaxonomy(wheel)


DEFAULT_TAXONOMY = _build_default()
