"""
Unit tests for checklist cloning with a mocked repository
"""

import pytest
from datetime import datetime
from unittest.mock import AsyncMock, Mock, call
from core.exceptions import (
    CloneFailedError,
    NotFoundError,
    PartialTreeCopyError,
    StoreWriteError,
)
from repositories.checklists import ChecklistRepository
from schemas.checklists import ChecklistRead, CategoryRead, ItemRead
from services.checklist_clone import ChecklistCloner

NOW = datetime(2024, 1, 15, 10, 30)


def make_checklist(checklist_id, name="QA Template", description="v1"):
    return ChecklistRead(id=checklist_id, name=name, description=description, created_at=NOW, updated_at=NOW)


def make_category(category_id, checklist_id, name="Intro", position=0):
    return CategoryRead(id=category_id, checklist_id=checklist_id, name=name, position=position)


def make_item(item_id, category_id, name="Greeting", position=0, is_active=True):
    return ItemRead(id=item_id, category_id=category_id, name=name, position=position, is_active=is_active)


@pytest.fixture
def repository():
    """Repository holding src-1 -> cat-1 -> (item-1, item-2)"""
    repo = AsyncMock(spec=ChecklistRepository)
    repo.get_checklist.return_value = make_checklist("src-1")
    repo.create_checklist.return_value = make_checklist("new-1", name="QA Template (Copy)")
    repo.list_categories.return_value = [make_category("cat-1", "src-1")]
    repo.create_category.return_value = make_category("new-cat-1", "new-1")
    repo.list_items.return_value = [
        make_item("item-1", "cat-1", "Greeting", 0, True),
        make_item("item-2", "cat-1", "Hold time", 1, False),
    ]
    repo.create_items.return_value = [
        make_item("new-item-1", "new-cat-1", "Greeting", 0, True),
        make_item("new-item-2", "new-cat-1", "Hold time", 1, False),
    ]
    return repo


class TestChecklistCloner:
    """Happy path and validation"""

    @pytest.mark.asyncio
    async def test_clone_returns_new_id(self, repository):
        cloner = ChecklistCloner(repository, name_suffix=" (Copy)")

        new_id = await cloner.clone("src-1")

        assert new_id == "new-1"
        created = repository.create_checklist.call_args.args[0]
        assert created.name == "QA Template (Copy)"
        assert created.description == "v1"
        repository.create_category.assert_awaited_once_with("new-1", name="Intro", position=0)

    @pytest.mark.asyncio
    async def test_items_copied_verbatim_into_new_category(self, repository):
        cloner = ChecklistCloner(repository)

        await cloner.clone("src-1")

        category_id, items = repository.create_items.call_args.args
        assert category_id == "new-cat-1"
        assert [(i.name, i.position, i.is_active) for i in items] == [
            ("Greeting", 0, True),
            ("Hold time", 1, False),
        ]

    @pytest.mark.asyncio
    async def test_empty_category_skips_item_insert(self, repository):
        repository.list_items.return_value = []
        cloner = ChecklistCloner(repository)

        await cloner.clone("src-1")

        repository.create_items.assert_not_called()
        repository.create_category.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_source_creates_nothing(self, repository):
        repository.get_checklist.return_value = None
        cloner = ChecklistCloner(repository)

        with pytest.raises(NotFoundError) as exc_info:
            await cloner.clone("missing")

        assert exc_info.value.context["record_id"] == "missing"
        repository.create_checklist.assert_not_called()
        repository.delete_checklist.assert_not_called()


class TestCloneRollback:
    """Compensating cleanup after a failed step"""

    @pytest.mark.asyncio
    async def test_checklist_insert_failure_needs_no_cleanup(self, repository):
        repository.create_checklist.side_effect = StoreWriteError("Insert rejected")
        cloner = ChecklistCloner(repository)

        with pytest.raises(CloneFailedError) as exc_info:
            await cloner.clone("src-1")

        context = exc_info.value.context
        assert context["new_checklist_id"] is None
        assert context["rolled_back"] is True
        repository.delete_checklist.assert_not_called()

    @pytest.mark.asyncio
    async def test_item_failure_deletes_children_first(self, repository):
        repository.create_items.side_effect = StoreWriteError("Network error")
        cloner = ChecklistCloner(repository)

        with pytest.raises(CloneFailedError) as exc_info:
            await cloner.clone("src-1")

        error = exc_info.value
        assert isinstance(error.original_exception, StoreWriteError)
        assert error.context["categories_created"] == 1
        assert error.context["items_created"] == 0
        repository.delete_category.assert_awaited_once_with("new-cat-1")
        repository.delete_checklist.assert_awaited_once_with("new-1")

    @pytest.mark.asyncio
    async def test_short_bulk_insert_is_partial_copy(self, repository):
        """The store answered with fewer rows than requested"""
        repository.create_items.return_value = [
            make_item("new-item-1", "new-cat-1", "Greeting", 0, True),
        ]
        manager = Mock()
        repository.delete_item.side_effect = lambda record_id: manager.delete("item", record_id)
        repository.delete_category.side_effect = lambda record_id: manager.delete("category", record_id)
        repository.delete_checklist.side_effect = lambda record_id: manager.delete("checklist", record_id)
        cloner = ChecklistCloner(repository)

        with pytest.raises(CloneFailedError) as exc_info:
            await cloner.clone("src-1")

        error = exc_info.value
        assert isinstance(error.original_exception, PartialTreeCopyError)
        assert error.original_exception.context["expected"] == 2
        assert error.original_exception.context["created"] == 1
        assert manager.delete.call_args_list == [
            call("item", "new-item-1"),
            call("category", "new-cat-1"),
            call("checklist", "new-1"),
        ]

    @pytest.mark.asyncio
    async def test_already_deleted_records_are_ignored(self, repository):
        repository.create_items.side_effect = StoreWriteError("Constraint violation")
        repository.delete_category.side_effect = NotFoundError("Category new-cat-1 not found")
        cloner = ChecklistCloner(repository)

        with pytest.raises(CloneFailedError) as exc_info:
            await cloner.clone("src-1")

        assert exc_info.value.context["rolled_back"] is True
        assert "cleanup_errors" not in exc_info.value.context
        repository.delete_checklist.assert_awaited_once_with("new-1")

    @pytest.mark.asyncio
    async def test_cleanup_failures_are_reported(self, repository):
        repository.create_items.side_effect = StoreWriteError("Constraint violation")
        repository.delete_checklist.side_effect = StoreWriteError("Store unavailable")
        cloner = ChecklistCloner(repository)

        with pytest.raises(CloneFailedError) as exc_info:
            await cloner.clone("src-1")

        context = exc_info.value.context
        assert context["rolled_back"] is False
        assert context["cleanup_errors"] == ["new-1: Store unavailable"]
        # Cleanup keeps going past the failing delete
        repository.delete_category.assert_awaited_once_with("new-cat-1")

    @pytest.mark.asyncio
    async def test_non_store_failure_is_rolled_back_too(self, repository):
        repository.list_categories.side_effect = RuntimeError("unexpected")
        cloner = ChecklistCloner(repository)

        with pytest.raises(CloneFailedError) as exc_info:
            await cloner.clone("src-1")

        assert isinstance(exc_info.value.original_exception, RuntimeError)
        repository.delete_checklist.assert_awaited_once_with("new-1")
