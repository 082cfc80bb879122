#!/usr/bin/env python3
"""
Seed the quest catalog with the Jeju/Seogwipo sample quests.

Quest ids are assigned by position in the data file, so running the script
again replaces the same documents instead of adding new ones.

Usage:
	python scripts/seed_quests.py [--data scripts/data/jeju_quests.json] [--dry-run]
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from questmap.domain.models.quest.QuestModel import Quest, Region
from questmap.infra.db import close_client, get_db
from questmap.infra.mongo.quests_repo import QuestsRepoMongo

DEFAULT_DATA = Path(__file__).resolve().parent / "data" / "jeju_quests.json"


def build_catalog(data: dict[str, Any]) -> list[Quest]:
	quests: list[Quest] = []
	for entry in data.get("question_quests", []):
		option_a, option_b, option_c, option_d = entry["options"]
		quests.append(
			Quest(
				quest_id=len(quests) + 1,
				city=entry["city"],
				town=entry.get("town"),
				village=entry.get("village"),
				question=entry["question"],
				option_a=option_a,
				option_b=option_b,
				option_c=option_c,
				option_d=option_d,
				correct_answer=entry["correct_answer"],
				score=entry.get("score", 1),
			)
		)
	for entry in data.get("photo_missions", []):
		quests.append(
			Quest.photo(
				quest_id=len(quests) + 1,
				region=Region(entry["city"], entry.get("town"), entry.get("village")),
				question=entry["question"],
			)
		)
	for quest in quests:
		quest.validate()
	return quests


async def seed(quests: list[Quest]) -> None:
	repo = QuestsRepoMongo(get_db())
	await repo.ensure_indexes()
	for quest in quests:
		await repo.upsert(quest)
		logging.info("Seeded quest %s (%s) in %s", quest.quest_id, quest.quest_type.value, quest.region.as_filter())


async def _run(path: Path, dry_run: bool) -> None:
	quests = build_catalog(json.loads(path.read_text(encoding="utf-8")))
	logging.info("Loaded %d quests from %s", len(quests), path)
	if dry_run:
		return
	try:
		await seed(quests)
	finally:
		await close_client()


def main() -> None:
	parser = argparse.ArgumentParser(description="Seed the Questmap quest catalog")
	parser.add_argument("--data", type=Path, default=DEFAULT_DATA, help="JSON catalog to load")
	parser.add_argument("--dry-run", action="store_true", help="Validate the catalog without writing")
	args = parser.parse_args()

	logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
	asyncio.run(_run(args.data, args.dry_run))


if __name__ == "__main__":
	main()
