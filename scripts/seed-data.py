#!/usr/bin/env python3
"""
Seed the dev graph database with a handful of profiles and edges.
Run from repo root: python scripts/seed-data.py
Uses GRAPH_DATABASE_URL from env or .env.

Edges go through the service layer so cached counters stay consistent.
"""
import asyncio
import sys
import uuid
from pathlib import Path

# shared and service packages on path
repo_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(repo_root / "shared"))
sys.path.insert(0, str(repo_root / "services" / "graph"))

DEMO_USERS = ("maya", "theo", "priya", "jonas")


async def _run(url: str) -> None:
    import sqlalchemy as sa

    from app.profiles.models import Profile
    from app.social_graph import service as svc
    from shared.database.postgres import get_async_session_factory

    factory = get_async_session_factory(url)
    async with factory() as session:
        ids: dict[str, uuid.UUID] = {}
        for username in DEMO_USERS:
            existing = await session.scalar(sa.select(Profile).where(Profile.username == username))
            if existing is None:
                existing = Profile(username=username, display_name=username.title())
                session.add(existing)
                await session.flush()
            ids[username] = existing.id

        # maya <-> theo mutual, priya -> maya one-way, jonas blocks priya
        for follower, followee in (("maya", "theo"), ("theo", "maya"), ("priya", "maya")):
            if not (await svc.resolve(session, ids[follower], ids[followee])).can_follow:
                continue
            await svc.follow(session, ids[follower], ids[followee])
        if not await svc.is_blocked_by(session, blocked_id=ids["priya"], blocker_id=ids["jonas"]):
            await svc.block(session, ids["jonas"], ids["priya"])
        await session.commit()


def seed_graph() -> None:
    from app.config import get_settings

    url = get_settings().graph_database_url
    try:
        asyncio.run(_run(url))
        print(f"Graph: seeded {', '.join(DEMO_USERS)}")
    except Exception as e:
        print(f"Graph seed skip or error: {e}", file=sys.stderr)


def main() -> None:
    seed_graph()
    print("Seed done.")


if __name__ == "__main__":
    main()
