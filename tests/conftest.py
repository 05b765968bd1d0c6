import pytest

from data_cleaner.session_state import CleaningSession


@pytest.fixture
def people_headers():
    return ["name", "email", "age", "city"]


@pytest.fixture
def people_rows():
    return [
        {"name": "Ann Lee", "email": "ann@example.com", "age": 31, "city": "NYC"},
        {"name": "bob  ray ", "email": "bob@", "age": "29", "city": ""},
        {"name": "Ann Lee", "email": "ann@example.com", "age": 31, "city": "NYC"},
        {"name": "CARL", "email": None, "age": 400, "city": "Boston"},
    ]


@pytest.fixture
def session(people_rows, people_headers):
    s = CleaningSession()
    ok, _ = s.load_table(people_rows, people_headers, label="people.xlsx")
    assert ok
    return s
