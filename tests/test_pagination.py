import pytest

from crm_backend.core.errors import InvalidQueryError
from crm_backend.models import Client
from crm_backend.tenancy.pagination import QuerySpec, escape_like, paginate, sort_clauses

SEARCH = ("name", "description")


@pytest.mark.parametrize(
    "page, limit, expected",
    [
        (None, None, (1, 10)),
        ("2", "5", (2, 5)),
        ("0", "-3", (1, 10)),
        ("abc", "", (1, 10)),
        (3, 7, (3, 7)),
    ],
)
def test_query_spec_defaults(page, limit, expected):
    spec = QuerySpec.from_params(page, limit)
    assert (spec.page, spec.limit) == expected


def test_query_spec_caps_limit():
    assert QuerySpec.from_params(1, 5000, max_limit=100).limit == 100
    assert QuerySpec.from_params(search="", sort="").search is None


def test_escape_like():
    assert escape_like("50%_off\\") == "50\\%\\_off\\\\"


def test_unknown_sort_field_is_rejected():
    with pytest.raises(InvalidQueryError):
        sort_clauses(Client, "hashed_password")
    with pytest.raises(InvalidQueryError):
        sort_clauses(Client, "leads")


@pytest.fixture()
async def many_clients(factory):
    company = await factory.company("Paged")
    for i in range(25):
        await factory.client(company, f"Client {i:02d}")
    return company


async def test_page_arithmetic(db, many_clients):
    where = [Client.company_id == many_clients.id]
    first = await paginate(db, Client, where, QuerySpec(page=1, limit=10))
    assert len(first.items) == 10
    assert first.meta() == {"total": 25, "page": 1, "limit": 10, "pages": 3}

    last = await paginate(db, Client, where, QuerySpec(page=3, limit=10))
    assert len(last.items) == 5

    beyond = await paginate(db, Client, where, QuerySpec(page=4, limit=10))
    assert beyond.items == []
    assert beyond.total == 25


async def test_pages_do_not_overlap(db, many_clients):
    where = [Client.company_id == many_clients.id]
    seen = []
    for page in (1, 2, 3):
        result = await paginate(db, Client, where, QuerySpec(page=page, limit=10), default_sort="name")
        seen.extend(client.id for client in result.items)
    assert len(seen) == len(set(seen)) == 25


async def test_descending_sort(db, many_clients):
    where = [Client.company_id == many_clients.id]
    for sort in ("-name", "name:desc"):
        result = await paginate(db, Client, where, QuerySpec(limit=3, sort=sort))
        assert [c.name for c in result.items] == ["Client 24", "Client 23", "Client 22"]


async def test_search_is_case_insensitive_substring(db, factory):
    company = await factory.company()
    await factory.client(company, "Acme Corp")
    await factory.client(company, "Globex")
    where = [Client.company_id == company.id]

    for term in ("acme", "ACME CORP", "me co"):
        page = await paginate(db, Client, where, QuerySpec(search=term), search_fields=SEARCH)
        assert [c.name for c in page.items] == ["Acme Corp"]
        assert page.total == 1

    page = await paginate(db, Client, where, QuerySpec(search="Acme-Corp"), search_fields=SEARCH)
    assert page.total == 0


async def test_search_wildcards_are_literal(db, factory):
    company = await factory.company()
    await factory.client(company, "100% Organic")
    await factory.client(company, "Plain Foods")
    where = [Client.company_id == company.id]

    page = await paginate(db, Client, where, QuerySpec(search="%"), search_fields=SEARCH)
    assert [c.name for c in page.items] == ["100% Organic"]


async def test_search_also_matches_other_fields(db, factory):
    company = await factory.company()
    await factory.client(company, "Initech", description="Printer supplies")
    where = [Client.company_id == company.id]
    page = await paginate(db, Client, where, QuerySpec(search="printer"), search_fields=SEARCH)
    assert page.total == 1
