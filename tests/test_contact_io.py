from __future__ import annotations

import pytest

from personal_crm.core.errors import CrmValidationError
from personal_crm.schemas import CompanyCreate, ContactCreate
from personal_crm.services.contact_io import EXPORT_COLUMNS, map_columns
from personal_crm.services.csv_codec import parse_csv


def test_header_synonyms_are_normalized() -> None:
    columns = map_columns(["Given Name", " SURNAME ", "E-mail", "Organisation", "DOB", "Fax"])

    assert columns == {
        "first_name": 0,
        "last_name": 1,
        "email": 2,
        "company_name": 3,
        "birthday": 4,
    }


@pytest.mark.anyio("asyncio")
async def test_export_writes_every_contact_with_fixed_header(service) -> None:
    acme = await service.create_company(CompanyCreate(name="Acme, Inc."))
    await service.create_contact(
        ContactCreate(first_name="Ada", last_name="Lovelace", company_id=acme.id, notes='Say "hi"')
    )
    await service.create_contact(ContactCreate(first_name="Bob"))

    rows = parse_csv(await service.export_contacts_csv())

    assert rows[0] == EXPORT_COLUMNS
    assert rows[1] == ["Ada", "Lovelace", "", "", "Acme, Inc.", "", "", "", 'Say "hi"']
    assert rows[2] == ["Bob", "", "", "", "", "", "", "", ""]
    assert len(rows) == 3


@pytest.mark.anyio("asyncio")
async def test_import_creates_contacts_and_reports_duplicates(service) -> None:
    jane = await service.create_contact(
        ContactCreate(first_name="Jane", last_name="Doe", email="jane@example.com")
    )
    acme = await service.create_company(CompanyCreate(name="Acme"))
    text = (
        "First Name,Last Name,E-mail,Company\n"
        "Jane,Doe,jane@example.com,Acme\n"
        "Bob,Builder,,acme\n"
    )

    result = await service.import_contacts_csv(text)

    assert result.created == 1
    assert result.skipped == 0
    assert result.errors == []
    assert len(result.duplicates) == 1
    assert result.duplicates[0].row == 2
    assert result.duplicates[0].existing.id == jane.id
    assert result.duplicates[0].incoming == "Jane Doe"

    bob = (await service.search_contacts("Bob Builder"))[0]
    assert bob.company_id == acme.id
    assert len(await service.list_companies()) == 1


@pytest.mark.anyio("asyncio")
async def test_import_records_row_errors_and_continues(service) -> None:
    text = (
        "first_name,last_name,company,birthday\n"
        ",Nobody,,\n"
        "\n"
        "Ada,Lovelace,Analytical Engines,1815-12-10\n"
        "Bad,Date,,12/10/1815\n"
        "Charles,Babbage,analytical engines,\n"
        "Ada,Lovelace,,\n"
    )

    result = await service.import_contacts_csv(text)

    assert result.created == 2
    assert result.skipped == 1
    assert result.errors[0] == "Row 2: first_name is required"
    assert result.errors[1].startswith("Row 5:")
    assert len(result.errors) == 2
    assert [d.row for d in result.duplicates] == [7]

    companies = await service.list_companies()
    assert [c.name for c in companies] == ["Analytical Engines"]


@pytest.mark.anyio("asyncio")
async def test_import_rejects_malformed_input(service) -> None:
    with pytest.raises(CrmValidationError):
        await service.import_contacts_csv("first_name,last_name\n")
    with pytest.raises(CrmValidationError):
        await service.import_contacts_csv("name,email\nAda,ada@example.com\n")


@pytest.mark.anyio("asyncio")
async def test_export_then_import_finds_only_duplicates(service) -> None:
    await service.create_contact(ContactCreate(first_name="Ada", email="ada@example.com"))
    await service.create_contact(ContactCreate(first_name="Bob", last_name="Builder"))

    result = await service.import_contacts_csv(await service.export_contacts_csv())

    assert result.created == 0
    assert len(result.duplicates) == 2


@pytest.mark.anyio("asyncio")
async def test_import_reports_overlong_first_name_as_row_error(service) -> None:
    text = "first_name,last_name\n" + "A" * 121 + ",Long\nBob,Builder\n"

    result = await service.import_contacts_csv(text)

    assert result.created == 1
    assert result.skipped == 1
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Row 2:")
    assert [c.first_name for c in await service.list_contacts()] == ["Bob"]
