from __future__ import annotations

import pytest

from personal_crm.schemas import ContactCreate, DuplicateCandidate


@pytest.mark.anyio("asyncio")
async def test_email_match_is_exact_and_case_sensitive(service) -> None:
    jane = await service.create_contact(
        ContactCreate(first_name="Jane", last_name="Doe", email="jane@example.com")
    )

    hits = await service.find_duplicates(
        DuplicateCandidate(first_name="Someone", last_name="Else", email="jane@example.com")
    )
    assert [c.id for c in hits] == [jane.id]

    misses = await service.find_duplicates(
        DuplicateCandidate(first_name="Someone", last_name="Else", email="JANE@example.com")
    )
    assert misses == []


@pytest.mark.anyio("asyncio")
async def test_name_match_ignores_case_and_missing_last_name(service) -> None:
    jane = await service.create_contact(ContactCreate(first_name="Jane", last_name="Doe"))
    cher = await service.create_contact(ContactCreate(first_name="Cher"))

    hits = await service.find_duplicates(DuplicateCandidate(first_name="JANE", last_name="doe"))
    assert [c.id for c in hits] == [jane.id]

    assert [c.id for c in await service.find_duplicates(DuplicateCandidate(first_name="cher"))] == [
        cher.id
    ]
    assert await service.find_duplicates(DuplicateCandidate(first_name="Jane")) == []
    near_miss = DuplicateCandidate(first_name="Jan", last_name="Doe")
    assert await service.find_duplicates(near_miss) == []


@pytest.mark.anyio("asyncio")
async def test_email_hits_come_first_without_repeats(service) -> None:
    by_name = await service.create_contact(ContactCreate(first_name="Sam", last_name="Lee"))
    by_email = await service.create_contact(
        ContactCreate(first_name="Samuel", last_name="Lee", email="sam@example.com")
    )
    both = await service.create_contact(
        ContactCreate(first_name="Sam", last_name="Lee", email="sam@example.com")
    )

    hits = await service.find_duplicates(
        DuplicateCandidate(first_name="sam", last_name="LEE", email="sam@example.com")
    )

    assert [c.id for c in hits] == [by_email.id, both.id, by_name.id]
