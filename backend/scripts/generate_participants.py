#!/usr/bin/env python3
"""
Regenerate the participant store from a team roster.

Every existing participant and claim history row is removed, then one
participant is created per roster member with id ``{TEAM_ID}-M{n}`` and all
meals unclaimed.

Usage:
    python -m backend.scripts.generate_participants roster.json [--dry-run] [-v]

Roster format (JSON list; camelCase keys are accepted too):
    [{"team_id": "T01", "team_name": "Byte Me", "members": ["Asha", "Ravi"]}]
"""
import argparse
import asyncio
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from backend.database import AsyncSessionLocal
from backend.models.participant import Participant
from backend.services.claim_history_service import ClaimHistoryService
from backend.services.participant_service import ParticipantService

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

MAX_MEMBERS_PER_TEAM = 4


class RosterError(ValueError):
    """Raised when the roster file cannot be read or is malformed."""


@dataclass
class RosterTeam:
    team_id: str
    team_name: str
    members: list[str]


@dataclass
class GenerationSummary:
    created: int = 0
    failed: int = 0
    teams: int = 0
    skipped_teams: int = 0
    cleared_participants: int = 0
    cleared_claims: int = 0
    participant_ids: list[str] = field(default_factory=list)


def participant_id_for(team_id: str, member_number: int) -> str:
    return f"{team_id}-M{member_number}"


def _pick(entry: dict, *keys: str):
    for key in keys:
        if key in entry:
            return entry[key]
    return None


def parse_roster(data) -> list[RosterTeam]:
    """Validate decoded roster JSON into teams with normalized ids."""
    if not isinstance(data, list):
        raise RosterError("Roster must be a JSON list of teams")

    teams = []
    for position, entry in enumerate(data, start=1):
        if not isinstance(entry, dict):
            raise RosterError(f"Roster entry {position} is not an object")

        team_id = _pick(entry, "team_id", "teamId")
        team_name = _pick(entry, "team_name", "teamName")
        members = _pick(entry, "members") or []
        if not isinstance(team_id, str) or not team_id.strip():
            raise RosterError(f"Roster entry {position} has no team id")
        if not isinstance(team_name, str) or not team_name.strip():
            raise RosterError(f"Roster entry {position} ({team_id}) has no team name")
        if not isinstance(members, list):
            raise RosterError(f"Roster entry {position} ({team_id}) members must be a list")

        teams.append(
            RosterTeam(
                team_id=team_id.strip().upper(),
                team_name=team_name.strip(),
                members=[str(member).strip() for member in members if str(member).strip()],
            )
        )
    return teams


def load_roster(path: Path) -> list[RosterTeam]:
    try:
        with open(path, encoding="utf-8") as roster_file:
            data = json.load(roster_file)
    except (OSError, json.JSONDecodeError) as exc:
        raise RosterError(f"Could not read roster {path}: {exc}") from exc
    return parse_roster(data)


async def generate_participants(
    teams: list[RosterTeam],
    session_factory=AsyncSessionLocal,
    dry_run: bool = False,
) -> GenerationSummary:
    """
    Replace all participants with the roster's members in one transaction.

    Args:
        teams: Parsed roster
        session_factory: Async session factory to write with
        dry_run: If True, roll back instead of committing

    Returns:
        GenerationSummary with per-member success and failure counts

    Raises:
        SQLAlchemyError: The database could not be reached or rejected the write
    """
    summary = GenerationSummary(teams=len(teams))

    async with session_factory() as db:
        try:
            participant_service = ParticipantService(db)
            history_service = ClaimHistoryService(db)

            summary.cleared_claims = await history_service.delete_all()
            summary.cleared_participants = await participant_service.delete_all()

            seen_ids: set[str] = set()
            for team in teams:
                if not team.members:
                    logger.warning(f"Team {team.team_id} has no members, skipping...")
                    summary.skipped_teams += 1
                    continue

                logger.info(f"Team {team.team_id} - {team.team_name} ({len(team.members)} members)")
                for member_number, member_name in enumerate(team.members, start=1):
                    participant_id = participant_id_for(team.team_id, member_number)
                    if member_number > MAX_MEMBERS_PER_TEAM:
                        logger.error(
                            f"  {participant_id} - Error: teams have at most {MAX_MEMBERS_PER_TEAM} members"
                        )
                        summary.failed += 1
                        continue
                    if participant_id in seen_ids:
                        logger.error(f"  {participant_id} - Error: duplicate participant id")
                        summary.failed += 1
                        continue

                    participant_service.add_participant(
                        participant_id=participant_id,
                        team_id=team.team_id,
                        team_name=team.team_name,
                        member_name=member_name,
                        member_number=member_number,
                    )
                    seen_ids.add(participant_id)
                    summary.participant_ids.append(participant_id)
                    summary.created += 1
                    logger.debug(f"  {participant_id} - {member_name}")

            await db.flush()

            if dry_run:
                logger.info("Dry run: rolling back generated participants")
                await db.rollback()
            else:
                await db.commit()

        except Exception as e:
            logger.error(f"Error generating participants: {e}")
            await db.rollback()
            raise

    return summary


async def log_sample(session_factory=AsyncSessionLocal, limit: int = 5) -> None:
    async with session_factory() as db:
        result = await db.execute(
            select(Participant).order_by(Participant.team_id, Participant.member_number).limit(limit)
        )
        logger.info("Sample participants:")
        for participant in result.scalars().all():
            logger.info(f"   {participant.participant_id} - {participant.member_name} ({participant.team_name})")


def log_summary(summary: GenerationSummary) -> None:
    logger.info("=" * 70)
    logger.info("GENERATION SUMMARY")
    logger.info("=" * 70)
    logger.info(f"Cleared participants: {summary.cleared_participants} (claim history rows: {summary.cleared_claims})")
    logger.info(f"Successfully generated: {summary.created}")
    logger.info(f"Failed: {summary.failed}")
    logger.info(f"Total teams: {summary.teams} ({summary.skipped_teams} skipped without members)")
    logger.info("=" * 70)


async def run(roster_path: Path, dry_run: bool = False) -> int:
    """Run the full provisioning job; returns the process exit code."""
    try:
        teams = load_roster(roster_path)
    except RosterError as exc:
        logger.error(f"Fatal error: {exc}")
        return 1

    logger.info(f"Found {len(teams)} teams in {roster_path}")
    if not teams:
        logger.warning("No teams found. Nothing to generate.")
        return 0

    try:
        summary = await generate_participants(teams, dry_run=dry_run)
        log_summary(summary)
        if not dry_run:
            await log_sample()
    except (SQLAlchemyError, OSError) as exc:
        logger.error(f"Fatal error: {exc}")
        return 1

    logger.info("Participant generation completed successfully!")
    return 0


def main():
    """Main entry point for the provisioning script."""
    parser = argparse.ArgumentParser(
        description="Regenerate participants from a team roster"
    )
    parser.add_argument(
        "roster",
        type=Path,
        help="Path to the JSON team roster"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate and generate without committing"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every generated participant"
    )
    args = parser.parse_args()

    if args.verbose:
        logger.setLevel(logging.DEBUG)

    sys.exit(asyncio.run(run(args.roster, dry_run=args.dry_run)))


if __name__ == "__main__":
    main()
