from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from questmap.domain.models.quest.QuestModel import Quest, QuestType, Region
from questmap.domain.usecase._shared import parse_region
from questmap.domain.usecase.ports import NotFoundError, QuestsRepo, UnavailableError

log = logging.getLogger(__name__)

PHOTO_RATIO = 0.5


@dataclass(slots=True)
class SelectedQuest:
    quest: Quest
    requested: QuestType

    @property
    def fell_back(self) -> bool:
        return self.quest.quest_type is not self.requested


@dataclass(slots=True)
class SelectRandomQuest:
    """Pick one quest in a region, weighting the requested type 50/50.

    The draw is on type, not on population: a region with nine question
    quests and one photo quest still serves the photo quest about half the
    time. If the drawn type is absent the opposite type is tried once.
    """

    quests_repo: QuestsRepo
    rng: random.Random = field(default_factory=random.Random)
    photo_ratio: float = PHOTO_RATIO

    def draw_type(self) -> QuestType:
        if self.rng.random() < self.photo_ratio:
            return QuestType.PHOTO
        return QuestType.QUESTION

    async def execute(
        self,
        *,
        city: Optional[str],
        town: Optional[str] = None,
        village: Optional[str] = None,
    ) -> SelectedQuest:
        region = parse_region(city, town, village)
        requested = self.draw_type()

        for quest_type in (requested, requested.opposite):
            quest = await self.quests_repo.sample(region, quest_type)
            if quest is not None:
                selected = SelectedQuest(quest=quest, requested=requested)
                if selected.fell_back:
                    log.debug(
                        "No %s quest in region; served %s instead",
                        requested.value,
                        quest_type.value,
                        extra={"region": region.as_filter()},
                    )
                return selected

        available = await self._available_regions()
        raise NotFoundError(
            f"No quest found for region {region.as_filter()}",
            details={
                "region": region.as_filter(),
                "available_regions": [r.as_filter() for r in available],
            },
        )

    async def _available_regions(self) -> list[Region]:
        try:
            return await self.quests_repo.list_regions()
        except UnavailableError as exc:
            log.warning("Could not list regions for diagnostics", exc_info=exc)
            return []
