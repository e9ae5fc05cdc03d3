"""Tests for shared/repository.py."""

from typing import Optional
from unittest.mock import MagicMock

from shared.repository import BaseRepository


class TestBaseRepository:
    def test_init_stores_db_client(self):
        """Should store the database client in _db attribute."""
        mock_db = MagicMock()
        repo = BaseRepository(mock_db)
        assert repo._db is mock_db

    def test_subclass_can_access_db(self):
        mock_db = MagicMock()
        mock_db.table.return_value.select.return_value.execute.return_value.data = [
            {"id": "123", "name": "test"}
        ]

        class TestRepository(BaseRepository[dict]):
            def get_first(self) -> Optional[dict]:
                return self._first_row(self._db.table("test").select("*").execute())

        repo = TestRepository(mock_db)

        assert repo.get_first() == {"id": "123", "name": "test"}
        mock_db.table.assert_called_once_with("test")


class TestFirstRow:
    def test_empty_result(self):
        result = MagicMock()
        result.data = []
        assert BaseRepository._first_row(result) is None

    def test_none_data(self):
        result = MagicMock()
        result.data = None
        assert BaseRepository._first_row(result) is None

    def test_returns_first(self):
        result = MagicMock()
        result.data = [{"id": "a"}, {"id": "b"}]
        assert BaseRepository._first_row(result) == {"id": "a"}
