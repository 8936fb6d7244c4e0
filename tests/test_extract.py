import pandas as pd

from kpi_board.extract import (
    VALUE_SLOTS,
    clean_cell,
    extract_kpi_values,
    grid_from_frame,
    normalize_display_value,
)


def test_value_slots():
    assert VALUE_SLOTS == [
        "scz-meta", "scz-real",
        "lpz-meta", "lpz-real",
        "cbba-meta", "cbba-real",
        "tja-meta", "tja-real",
        "embol-meta", "embol-real",
    ]


def test_ltir_row_end_to_end():
    grid = [["", "LTIR Enero", "5", "3", "", "", "", "", "", "", "", ""]]
    assert extract_kpi_values(grid) == {"ltir": ["5", "3", "", "", "", "", "", "", "", ""]}


def test_short_rows_are_skipped():
    assert extract_kpi_values([[], ["LTIR"], None]) == {}


def test_missing_trailing_cells_are_blank():
    out = extract_kpi_values([["x", "Reclamos", "1", "2"]])
    assert out == {"reclamos": ["1", "2"] + [""] * 8}


def test_unrecognized_rows_are_skipped():
    grid = [
        ["", "KPI", "SCZ Meta", "SCZ Real"],
        ["", "Costo Bodega", "10", "11"],
    ]
    assert list(extract_kpi_values(grid)) == ["bodega"]


def test_later_duplicate_row_wins():
    grid = [
        ["", "LTIR", "1", "1"],
        ["", "ltir acumulado", "2", "2"],
    ]
    assert extract_kpi_values(grid)["ltir"][:2] == ["2", "2"]


def test_cells_are_trimmed_and_stringified():
    grid = [["", "  Nivel de servicio ", 95, None, " 97 "]]
    assert extract_kpi_values(grid)["servicio"][:3] == ["95", "", "97"]


def test_custom_columns():
    grid = [["LTIR", "a", "b", "c"]]
    assert extract_kpi_values(grid, label_col=0, value_start=1, width=2) == {"ltir": ["a", "b"]}


def test_empty_grid():
    assert extract_kpi_values(None) == {}
    assert extract_kpi_values([]) == {}


def test_display_normalization():
    assert normalize_display_value("12,5") == "12.5"
    assert normalize_display_value("12.5") == "12.5"
    assert normalize_display_value('"7"') == "7"
    assert normalize_display_value("'3,2'") == "3.2"
    assert normalize_display_value("1.234,5") == "1.234,5"
    assert normalize_display_value(None) == ""


def test_clean_cell_nan():
    assert clean_cell(float("nan")) == ""
    assert clean_cell(4) == "4"


def test_grid_from_frame():
    frame = pd.DataFrame([["a", None], ["b", "c"]])
    assert grid_from_frame(frame) == [["a", ""], ["b", "c"]]
    assert grid_from_frame(pd.DataFrame()) == []
