import pytest

from database import Database
from diary import Diary


@pytest.fixture
def db(tmp_path, request):
    # A fresh database file for every test
    db_file = str(tmp_path / f"test_{request.node.name}.db")
    database = Database.open(db_file)
    yield database
    database.close()


@pytest.fixture
def diary(db):
    diary = Diary(db)
    diary.ensure_schema()
    return diary
