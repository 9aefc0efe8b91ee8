from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

from personal_crm.cli import cli


def _invoke(db_path: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(cli, ["--database-url", f"sqlite:///{db_path}", *args])


def test_migrate_reports_schema_version(tmp_path: Path) -> None:
    result = _invoke(tmp_path / "cli.db", "migrate")

    assert result.exit_code == 0, result.output
    assert "version 3" in result.output


def test_import_then_export(tmp_path: Path) -> None:
    db_path = tmp_path / "cli.db"
    source = tmp_path / "contacts.csv"
    source.write_text(
        "First Name,Last Name,Email,Company\n"
        "Ada,Lovelace,ada@example.com,Engines Ltd\n"
        ",Nobody,,\n",
        encoding="utf-8",
    )

    imported = _invoke(db_path, "import", str(source))
    assert imported.exit_code == 0, imported.output
    assert "Created 1, skipped 1, duplicates 0, errors 1" in imported.output

    again = _invoke(db_path, "import", str(source))
    assert "Created 0, skipped 1, duplicates 1, errors 1" in again.output
    assert "Row 2: Ada Lovelace matches existing contact #1" in again.output

    target = tmp_path / "export.csv"
    exported = _invoke(db_path, "export", "--output", str(target))
    assert exported.exit_code == 0, exported.output
    assert target.read_text(encoding="utf-8").splitlines() == [
        "first_name,last_name,email,phone,company_name,birthday,anniversary,tags,notes",
        "Ada,Lovelace,ada@example.com,,Engines Ltd,,,,",
    ]

    to_stdout = _invoke(db_path, "export")
    assert "Ada,Lovelace" in to_stdout.output


def test_import_without_first_name_column_fails(tmp_path: Path) -> None:
    source = tmp_path / "bad.csv"
    source.write_text("name,email\nAda,ada@example.com\n", encoding="utf-8")

    result = _invoke(tmp_path / "cli.db", "import", str(source))

    assert result.exit_code != 0
    assert "first_name" in result.output
