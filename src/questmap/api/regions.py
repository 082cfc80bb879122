"""Display labels for region names. Only outgoing responses are relabelled."""

from __future__ import annotations

from typing import Mapping, Optional

from questmap.domain.models.quest.QuestModel import Region

CITY_LABELS: Mapping[str, str] = {
    "Jeju": "제주시",
    "Seogwipo": "서귀포시",
}

TOWN_LABELS: Mapping[str, str] = {
    "Aewol": "애월읍",
    "Gujwa": "구좌읍",
    "Seogwi": "서귀동",
    "Seongsan": "성산읍",
}

# Seongsan is both a town (읍) and a village (리)
VILLAGE_LABELS: Mapping[str, str] = {
    "Woljeong": "월정리",
    "Sehwa": "세화리",
    "Seongsan": "성산리",
}


def _label(labels: Mapping[str, str], name: Optional[str]) -> Optional[str]:
    if name is None:
        return None
    return labels.get(name, name)


def region_label(region: Region) -> str:
    parts = (
        _label(CITY_LABELS, region.city),
        _label(TOWN_LABELS, region.town),
        _label(VILLAGE_LABELS, region.village),
    )
    return " ".join(part for part in parts if part)
