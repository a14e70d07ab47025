"""Tests for the offline participant provisioning script."""
import json
from datetime import datetime, UTC

import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError

from backend.models.meal_claim import MealClaim
from backend.models.participant import Participant
from backend.scripts import generate_participants as generate_participants_module
from backend.scripts.generate_participants import (
    RosterError,
    generate_participants,
    load_roster,
    parse_roster,
    run,
)


ROSTER = [
    {"team_id": "t01", "team_name": "Byte Me", "members": ["Asha", "Ravi"]},
    {"teamId": "T02", "teamName": "Null Pointers", "members": ["Meera", " ", "Kiran", "Dev", "Nila", "Zoya"]},
    {"team_id": "T03", "team_name": "Ghost Team", "members": []},
]


async def _participants(session_factory) -> list[Participant]:
    async with session_factory() as session:
        result = await session.execute(
            select(Participant).order_by(Participant.team_id, Participant.member_number)
        )
        return list(result.scalars().all())


def test_parse_roster_normalizes_teams():
    teams = parse_roster(ROSTER)

    assert [team.team_id for team in teams] == ["T01", "T02", "T03"]
    assert teams[1].team_name == "Null Pointers"
    assert teams[1].members == ["Meera", "Kiran", "Dev", "Nila", "Zoya"]
    assert teams[2].members == []


@pytest.mark.parametrize("data", [
    {"team_id": "T01"},
    [["T01", "Byte Me"]],
    [{"team_name": "No Id", "members": ["A"]}],
    [{"team_id": "T01", "members": ["A"]}],
    [{"team_id": "T01", "team_name": "Byte Me", "members": "Asha"}],
])
def test_parse_roster_rejects_malformed(data):
    with pytest.raises(RosterError):
        parse_roster(data)


def test_load_roster_reads_json(tmp_path):
    roster_path = tmp_path / "roster.json"
    roster_path.write_text(json.dumps(ROSTER), encoding="utf-8")

    assert len(load_roster(roster_path)) == 3


def test_load_roster_missing_file(tmp_path):
    with pytest.raises(RosterError):
        load_roster(tmp_path / "missing.json")


@pytest.mark.asyncio
async def test_generate_participants_replaces_store(session_factory, participant_factory):
    await participant_factory("T99-M1", member_name="Old")
    async with session_factory() as session:
        session.add(
            MealClaim(
                participant_id="T99-M1",
                team_id="T99",
                team_name="Old Team",
                member_name="Old",
                meal_type="lunch",
                claimed_at=datetime(2026, 3, 14, 6, 30, tzinfo=UTC),
            )
        )
        await session.commit()

    summary = await generate_participants(parse_roster(ROSTER), session_factory=session_factory)

    assert summary.cleared_participants == 1
    assert summary.cleared_claims == 1
    assert summary.created == 6
    assert summary.failed == 1
    assert summary.teams == 3
    assert summary.skipped_teams == 1

    participants = await _participants(session_factory)
    assert [participant.participant_id for participant in participants] == [
        "T01-M1", "T01-M2", "T02-M1", "T02-M2", "T02-M3", "T02-M4",
    ]
    assert participants[4].member_name == "Dev"
    assert participants[5].member_name == "Nila"
    assert participants[5].member_number == 4
    for participant in participants:
        assert participant.breakfast_claimed is False
        assert participant.lunch_claimed is False
        assert participant.dinner_claimed is False
        assert participant.lunch_claimed_at is None

    async with session_factory() as session:
        history_count = (await session.execute(select(func.count()).select_from(MealClaim))).scalar_one()
    assert history_count == 0


@pytest.mark.asyncio
async def test_generate_participants_dry_run_keeps_existing(session_factory, participant_factory):
    await participant_factory("T99-M1", member_name="Old")

    summary = await generate_participants(parse_roster(ROSTER), session_factory=session_factory, dry_run=True)

    assert summary.created == 6
    participants = await _participants(session_factory)
    assert [participant.participant_id for participant in participants] == ["T99-M1"]


@pytest.mark.asyncio
async def test_run_fails_on_unreadable_roster(tmp_path):
    roster_path = tmp_path / "roster.json"
    roster_path.write_text("{not json", encoding="utf-8")

    assert await run(roster_path) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [
    ConnectionRefusedError(111, "Connection refused"),
    OperationalError("DELETE FROM participants", {}, Exception("database is locked")),
])
async def test_run_fails_when_database_unavailable(tmp_path, monkeypatch, error):
    roster_path = tmp_path / "roster.json"
    roster_path.write_text(json.dumps(ROSTER), encoding="utf-8")

    async def unavailable(teams, dry_run=False):
        raise error

    monkeypatch.setattr(generate_participants_module, "generate_participants", unavailable)

    assert await run(roster_path) == 1
