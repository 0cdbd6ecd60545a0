import csv
import io
from datetime import date

from modules.projects.export import CSV_COLUMNS, export_filename, render_csv
from modules.projects.models import ProjectExportRow


class TestRenderCsv:
    def test_header_only(self):
        assert render_csv([]).splitlines() == [",".join(h for h, _ in CSV_COLUMNS)]

    def test_rows_are_quoted(self):
        row = ProjectExportRow(
            name="Promo, spring",
            description='Says "hi"',
            short_name="promo",
            target_url="https://example.com",
            status="approved",
            owners="Ann (a@x.com), Bob (b@x.com)",
            created_at="2024-01-01T00:00:00+00:00",
            updated_at="2024-01-02T00:00:00+00:00",
            approver="Admin",
            approved_at="2024-01-02T00:00:00+00:00",
            click_count=7,
        )

        parsed = list(csv.reader(io.StringIO(render_csv([row]))))

        assert parsed[1][0] == "Promo, spring"
        assert parsed[1][1] == 'Says "hi"'
        assert parsed[1][5] == "Ann (a@x.com), Bob (b@x.com)"
        assert parsed[1][-1] == "7"


def test_export_filename():
    assert export_filename(date(2024, 3, 9)) == "aka-projects-2024-03-09.csv"
