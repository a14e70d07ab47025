"""Spreadsheet export of the full participant roster."""
from dataclasses import dataclass
from datetime import date, datetime, UTC
from io import BytesIO
from sqlalchemy.ext.asyncio import AsyncSession
from openpyxl import Workbook
from openpyxl.utils import get_column_letter
import logging

from backend.config import get_settings
from backend.models.base import MEAL_TYPES
from backend.models.participant import Participant
from backend.services.participant_service import ParticipantService
from backend.utils.datetime_helpers import format_claim_time
from backend.utils.exceptions import EmptyDatasetError

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SHEET_TITLE = "Food Claims"
CLAIMED_MARK = "✓"
PLACEHOLDER = "-"

# (header, column width)
IDENTITY_COLUMNS = [
    ("S.No", 6),
    ("Participant ID", 15),
    ("Team ID", 12),
    ("Team Name", 20),
    ("Member Name", 20),
    ("Member Number", 8),
]
MEAL_FLAG_WIDTH = 10
MEAL_TIME_WIDTH = 20


@dataclass
class ExportFile:
    """Rendered spreadsheet ready to be sent as an attachment."""

    filename: str
    content: bytes
    row_count: int
    media_type: str = XLSX_MEDIA_TYPE


def export_columns() -> list[tuple[str, int]]:
    columns = list(IDENTITY_COLUMNS)
    for meal in MEAL_TYPES:
        columns.append((meal.label, MEAL_FLAG_WIDTH))
        columns.append((f"{meal.label} Time", MEAL_TIME_WIDTH))
    return columns


class ExportService:
    """Service building the roster workbook."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.settings = get_settings()
        self.participants = ParticipantService(db)

    def build_filename(self, today: date | None = None) -> str:
        today = today or datetime.now(UTC).date()
        return f"{self.settings.event_name}_Food_{today.isoformat()}.xlsx"

    def build_row(self, index: int, participant: Participant) -> list:
        row = [
            index,
            participant.participant_id,
            participant.team_id,
            participant.team_name,
            participant.member_name,
            participant.member_number,
        ]
        for meal in MEAL_TYPES:
            claimed = participant.is_claimed(meal)
            row.append(CLAIMED_MARK if claimed else PLACEHOLDER)
            row.append(
                format_claim_time(participant.claimed_at(meal), self.settings.export_zone)
                if claimed else PLACEHOLDER
            )
        return row

    def build_workbook(self, participants: list[Participant]) -> bytes:
        """Render participants into xlsx bytes, one row each in the given order."""
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = SHEET_TITLE

        columns = export_columns()
        sheet.append([header for header, _ in columns])
        for position, (_, width) in enumerate(columns, start=1):
            sheet.column_dimensions[get_column_letter(position)].width = width

        for index, participant in enumerate(participants, start=1):
            sheet.append(self.build_row(index, participant))

        buffer = BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    async def export(self) -> ExportFile:
        """
        Export every participant ordered by team and member number.

        Raises:
            EmptyDatasetError: There are no participants to export
        """
        participants = await self.participants.list_participants()
        if not participants:
            raise EmptyDatasetError("No participants found")

        content = self.build_workbook(participants)
        export_file = ExportFile(
            filename=self.build_filename(),
            content=content,
            row_count=len(participants),
        )
        logger.info(f"Exported {export_file.row_count} participants to {export_file.filename}")
        return export_file
