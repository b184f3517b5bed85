import json
import logging

from stockpilot.__main__ import build_parser, main
from stockpilot.database import open_store
from stockpilot.database.repositories import ProductsRepo


def test_parser_requires_a_command():
    args = build_parser().parse_args(["report", "sales", "out.pdf", "--from", "2024-05-01"])
    assert (args.command, args.kind, args.date_from, args.date_to, args.engine) == (
        "report", "sales", "2024-05-01", None, "qt"
    )


def test_export_then_import_into_new_database(qapp, tmp_path, capsys):
    src = tmp_path / "src.db"
    s = open_store(src)
    try:
        ProductsRepo(s).create("Widget", 10.0, 6.0, 1)
    finally:
        s.close()

    backup = tmp_path / "backup.json"
    assert main(["--db", str(src), "export", str(backup)]) == 0
    assert len(json.loads(backup.read_text(encoding="utf-8"))["collections"]["products"]) == 1

    dst = tmp_path / "dst.db"
    assert main(["--db", str(dst), "import", str(backup)]) == 0
    assert "products: 1" in capsys.readouterr().out


def test_import_of_bad_file_returns_error_code(qapp, tmp_path, caplog):
    bad = tmp_path / "bad.json"
    bad.write_text("[]", encoding="utf-8")
    handlers = list(logging.getLogger("stockpilot").handlers)
    with caplog.at_level(logging.ERROR, logger="stockpilot"):
        assert main(["--db", str(tmp_path / "x.db"), "import", str(bad)]) == 1
    assert any(r.name == "stockpilot" and r.levelno == logging.ERROR for r in caplog.records)
    assert logging.getLogger("stockpilot").handlers == handlers


def test_summary_lists_low_stock(qapp, tmp_path, capsys):
    db = tmp_path / "s.db"
    s = open_store(db)
    try:
        ProductsRepo(s).create("Almost Gone", 5.0, 2.0, 1)
    finally:
        s.close()
    assert main(["--db", str(db), "summary"]) == 0
    out = capsys.readouterr().out
    assert "Balance:" in out and "Almost Gone" in out
