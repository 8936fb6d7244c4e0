from kpi_board import __main__ as cli
from kpi_board.sources import GridSource


class StaticSource(GridSource):
    def fetch_grid(self):
        return [["", "Auditorías", "4", "5"]]


def test_once_prints_table(monkeypatch, capsys):
    monkeypatch.setattr(cli, "resolve_client_source", lambda settings, url: StaticSource())
    assert cli.main(["--once"]) == 0
    out = capsys.readouterr().out
    assert "Auditorías" in out
    assert "scz-meta" in out


def test_missing_config_exits(monkeypatch):
    for var in ["KPI_API_URL", "KPI_CSV_URL", "SERVICE_ACCOUNT_KEY", "SPREADSHEET_ID"]:
        monkeypatch.delenv(var, raising=False)
    assert cli.main(["--once"]) == 2
