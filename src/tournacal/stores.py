from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable

from .labels import label
from .models import Tournament

DEFAULT_TOP_STORES = 8


class StoreType(str, Enum):
    METAGAME = "Metagame"
    REMETEBARLANG = "Remetebarlang"
    SAS_ES_KOS = "SAS és KOS"
    POTTYOS_ZEBRA = "Pöttyös Zebra"
    SPORT_KARTYA = "Sport Kártya"
    JATEK_CEH = "Játék Céh"
    RATMAYER = "Ratmayer"
    OTHER = "Other"


def _any(*needles: str) -> Callable[[str], bool]:
    return lambda name: any(needle in name for needle in needles)


def _all(*needles: str) -> Callable[[str], bool]:
    return lambda name: all(needle in name for needle in needles)


# Checked top to bottom against the lower-cased store name.
_STORE_RULES: list[tuple[Callable[[str], bool], StoreType]] = [
    (_any("metagame"), StoreType.METAGAME),
    (_any("remete"), StoreType.REMETEBARLANG),
    (_any("sas és kos", "bar of legends"), StoreType.SAS_ES_KOS),
    (_any("pöttyös", "zebra"), StoreType.POTTYOS_ZEBRA),
    (_any("sport", "kártya"), StoreType.SPORT_KARTYA),
    (_all("játék", "céh"), StoreType.JATEK_CEH),
    (_any("ratmayer"), StoreType.RATMAYER),
]

_STORE_PRIORITY = {
    StoreType.METAGAME: 1,
    StoreType.REMETEBARLANG: 2,
}


@dataclass(frozen=True, slots=True)
class PermanentStore:
    name: str
    city: str
    store_type: StoreType


PERMANENT_STORES: tuple[PermanentStore, ...] = (
    PermanentStore("Metagame", "Budapest", StoreType.METAGAME),
    PermanentStore("Remetebarlang", "Budapest", StoreType.REMETEBARLANG),
    PermanentStore("SAS és KOS", "Budapest", StoreType.SAS_ES_KOS),
    PermanentStore("Pöttyös Zebra", "Budapest", StoreType.POTTYOS_ZEBRA),
    PermanentStore("Sport Kártya", "Budapest", StoreType.SPORT_KARTYA),
    PermanentStore("Játék Céh", "Budapest", StoreType.JATEK_CEH),
    PermanentStore("Ratmayer", "Budapest", StoreType.RATMAYER),
)


@dataclass(slots=True)
class StoreInfo:
    name: str
    store_type: StoreType
    count: int = 0
    city: str = ""

    @property
    def disabled(self) -> bool:
        return self.count == 0


@dataclass(slots=True)
class StoreOverview:
    main: list[StoreInfo] = field(default_factory=list)
    other: list[StoreInfo] = field(default_factory=list)
    permanent: list[StoreInfo] = field(default_factory=list)

    @property
    def other_count(self) -> int:
        return len(self.other)

    @property
    def other_names(self) -> list[str]:
        return [store.name for store in self.other]


def get_store_type(store_name: str) -> StoreType:
    name = (store_name or "").lower()
    for matches, store_type in _STORE_RULES:
        if matches(name):
            return store_type
    return StoreType.OTHER


def store_type_label(store_type: StoreType, language: str) -> str:
    return label(f"store.{store_type.name.title()}", language, default=store_type.value)


def store_priority(store_type: StoreType) -> int:
    return _STORE_PRIORITY.get(store_type, 100)


def collect_stores(tournaments: Iterable[Tournament]) -> list[StoreInfo]:
    """Count tournaments per display store name, in first-encounter order."""
    stores: dict[str, StoreInfo] = {}
    for tournament in tournaments:
        name = tournament.display_store_name
        if not name:
            continue
        info = stores.get(name)
        if info is None:
            info = stores[name] = StoreInfo(name=name, store_type=get_store_type(name))
        info.count += 1
    return list(stores.values())


def sort_stores(stores: Iterable[StoreInfo]) -> list[StoreInfo]:
    # sorted() is stable, so equal counts keep first-encounter order.
    return sorted(stores, key=lambda s: (store_priority(s.store_type), -s.count))


def summarize_stores(
    tournaments: Iterable[Tournament],
    top_n: int = DEFAULT_TOP_STORES,
) -> StoreOverview:
    ranked = sort_stores(collect_stores(tournaments))

    per_type: dict[StoreType, int] = {}
    for store in ranked:
        per_type[store.store_type] = per_type.get(store.store_type, 0) + store.count

    permanent = [
        StoreInfo(
            name=entry.name,
            store_type=entry.store_type,
            count=per_type.get(entry.store_type, 0),
            city=entry.city,
        )
        for entry in PERMANENT_STORES
    ]
    return StoreOverview(main=ranked[:top_n], other=ranked[top_n:], permanent=permanent)


def other_store_names(
    tournaments: Iterable[Tournament],
    top_n: int = DEFAULT_TOP_STORES,
) -> list[str]:
    return summarize_stores(tournaments, top_n=top_n).other_names
