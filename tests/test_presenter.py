import logging

from kpi_board.extract import VALUE_SLOTS
from kpi_board.presenter import DEFAULT_ROW_LABELS, KpiTable, TablePresenter


def test_table_starts_blank():
    table = KpiTable()
    assert table.labels == DEFAULT_ROW_LABELS
    assert table.slots == VALUE_SLOTS
    assert table.row_values("LTIR") == [""] * 10


def test_row_map_covers_every_kpi():
    presenter = TablePresenter(KpiTable())
    assert presenter.row_map() == {
        "ltir": "LTIR",
        "reclamos": "Reclamos de clientes",
        "servicio": "Nivel de Servicio",
        "costo-transf": "Costo de Transformación",
        "bodega": "Costo de Bodega",
        "plan": "Ejecución del Plan",
        "auditorias": "Auditorías",
    }


def test_present_writes_normalized_values():
    table = KpiTable()
    presenter = TablePresenter(table)
    values = ["12,5", '"7"', "12.5", "", "", "", "", "", "", "1"]
    assert presenter.present({"servicio": values}) == ["servicio"]
    assert table.row_values("Nivel de Servicio") == ["12.5", "7", "12.5", "", "", "", "", "", "", "1"]
    assert table.row_values("LTIR") == [""] * 10


def test_short_value_list_blanks_remaining_slots():
    table = KpiTable()
    TablePresenter(table).present({"ltir": ["1"]})
    assert table.row_values("LTIR") == ["1"] + [""] * 9


def test_missing_display_row_logs_warning(caplog):
    table = KpiTable(labels=["LTIR"])
    with caplog.at_level(logging.WARNING, logger="kpi_board.presenter"):
        updated = TablePresenter(table).present({"bodega": ["1"] * 10, "ltir": ["2"] * 10})
    assert updated == ["ltir"]
    assert "No display row for bodega" in caplog.text
    assert table.row_values("LTIR") == ["2"] * 10


def test_unclassified_display_rows_are_left_alone():
    table = KpiTable(labels=["Totales", "LTIR"])
    TablePresenter(table).present({"ltir": ["3"] * 10})
    assert table.row_values("Totales") == [""] * 10


def test_highlights_expire():
    table = KpiTable(labels=["LTIR"])
    presenter = TablePresenter(table, highlight_seconds=0.7)
    presenter.fill_row("LTIR", ["1"] * 10, now=100.0)
    assert len(table.highlighted(now=100.5)) == 10
    assert table.highlighted(now=101.0) == []


def test_highlight_disabled():
    table = KpiTable(labels=["LTIR"])
    TablePresenter(table, highlight_seconds=0).present({"ltir": ["1"] * 10})
    assert table.highlighted() == []
