"""Tests for the CatalogManager mutations.

Uses the in-memory fake repository — no file I/O.
"""

import threading
import time

import pytest

from catalog.application.catalog_manager import CatalogManager
from catalog.domain.exceptions import DuplicateCodeError, NotFoundError, ValidationError
from catalog.domain.model.product import Product
from tests.fakes import FakeProductRepository


def _product(product_id: str, code: str, title: str = "Item", price: str = "10") -> Product:
    return Product.create(
        product_id=product_id,
        title=title,
        description="",
        price=price,
        thumbnail="",
        code=code,
        stock=1,
    )


def _setup(
    products: list[Product] | None = None,
    fail_writes: bool = False,
) -> tuple[CatalogManager, FakeProductRepository]:
    repo = FakeProductRepository(products, fail_writes=fail_writes)
    return CatalogManager(repo), repo


def _add(manager: CatalogManager, code: str, **overrides):
    fields = dict(
        title=f"Product {code}",
        description="A product",
        price="10.00",
        thumbnail="https://img.example/p.png",
        code=code,
        stock=3,
    )
    fields.update(overrides)
    return manager.create(**fields)


class TestInitialLoad:

    def test_missing_store_means_empty_catalog(self):
        manager, _ = _setup(None)
        assert manager.list_products() == []

    def test_loads_stored_products_in_order(self):
        manager, _ = _setup([_product("a", "A"), _product("b", "B")])
        assert [p.id for p in manager.list_products()] == ["a", "b"]

    def test_duplicate_stored_ids_keep_first(self):
        manager, _ = _setup([_product("a", "A"), _product("a", "B")])
        assert [p.code for p in manager.list_products()] == ["A"]

    def test_loading_does_not_persist(self):
        _, repo = _setup([_product("a", "A")])
        assert repo.save_count == 0


class TestCreate:

    def test_returns_product_with_generated_id(self):
        manager, _ = _setup()
        dto = _add(manager, "C1")
        assert dto.id
        assert dto.code == "C1"
        assert dto.stock == 3

    def test_list_returns_products_in_call_order(self):
        manager, _ = _setup()
        created = [_add(manager, code) for code in ("X", "Y", "Z")]
        assert manager.list_products() == created

    def test_ids_are_unique(self):
        manager, _ = _setup()
        ids = {_add(manager, f"C{i}").id for i in range(50)}
        assert len(ids) == 50

    def test_persists_full_catalog(self):
        manager, repo = _setup()
        _add(manager, "C1")
        _add(manager, "C2")
        assert repo.save_count == 2
        assert [p.code for p in repo.stored] == ["C1", "C2"]

    def test_duplicate_code_rejected(self):
        manager, repo = _setup()
        _add(manager, "C1")
        with pytest.raises(DuplicateCodeError, match="already in use"):
            _add(manager, "C1", title="Another")
        assert len(manager.list_products()) == 1
        assert repo.save_count == 1

    def test_invalid_fields_leave_catalog_unchanged(self):
        manager, repo = _setup()
        with pytest.raises(ValidationError):
            _add(manager, "C1", price="-5")
        with pytest.raises(ValidationError):
            _add(manager, "C2", stock=-1)
        assert manager.list_products() == []
        assert repo.save_count == 0

    def test_failed_write_does_not_fail_create(self, caplog):
        manager, repo = _setup(fail_writes=True)
        dto = _add(manager, "C1")
        assert manager.get_by_id(dto.id) == dto
        assert repo.stored is None
        assert "Backing store is behind" in caplog.text


class TestGetById:

    def test_returns_product(self):
        manager, _ = _setup([_product("a", "A", title="Lamp")])
        assert manager.get_by_id("a").title == "Lamp"

    def test_unknown_id_raises(self):
        manager, _ = _setup([_product("a", "A")])
        with pytest.raises(NotFoundError, match="'nope' not found"):
            manager.get_by_id("nope")

    def test_returns_snapshot_not_live_object(self):
        manager, _ = _setup([_product("a", "A", title="Lamp")])
        before = manager.get_by_id("a")
        manager.update("a", {"title": "Desk Lamp"})
        assert before.title == "Lamp"
        assert manager.get_by_id("a").title == "Desk Lamp"


class TestUpdate:

    def test_changes_only_stock(self):
        manager, _ = _setup()
        original = _add(manager, "C1")
        updated = manager.update(original.id, {"stock": 5})
        assert updated.stock == 5
        assert updated.id == original.id
        assert (updated.title, updated.description, updated.price, updated.thumbnail, updated.code) == (
            original.title,
            original.description,
            original.price,
            original.thumbnail,
            original.code,
        )

    def test_id_is_never_overwritten(self):
        manager, _ = _setup()
        dto = _add(manager, "C1")
        manager.update(dto.id, {"id": "other", "title": "Renamed"})
        assert manager.get_by_id(dto.id).title == "Renamed"
        with pytest.raises(NotFoundError):
            manager.get_by_id("other")

    def test_persists(self):
        manager, repo = _setup([_product("a", "A")])
        manager.update("a", {"price": "12.50"})
        assert repo.save_count == 1
        assert str(repo.stored[0].price) == "$12.50"

    def test_unknown_id_raises_and_does_not_persist(self):
        manager, repo = _setup([_product("a", "A")])
        with pytest.raises(NotFoundError):
            manager.update("nope", {"stock": 1})
        assert repo.save_count == 0

    def test_code_taken_by_other_product_rejected(self):
        manager, repo = _setup([_product("a", "A"), _product("b", "B")])
        with pytest.raises(DuplicateCodeError):
            manager.update("b", {"code": "A"})
        assert manager.get_by_id("b").code == "B"
        assert repo.save_count == 0

    def test_keeping_own_code_is_allowed(self):
        manager, _ = _setup([_product("a", "A")])
        assert manager.update("a", {"code": "A", "stock": 9}).stock == 9

    def test_invalid_value_rejected_without_change(self):
        manager, repo = _setup([_product("a", "A", title="Lamp")])
        with pytest.raises(ValidationError):
            manager.update("a", {"title": "Desk Lamp", "price": "free"})
        assert manager.get_by_id("a").title == "Lamp"
        assert repo.save_count == 0


class TestDelete:

    def test_removes_product(self):
        manager, _ = _setup([_product("a", "A"), _product("b", "B")])
        manager.delete("a")
        assert len(manager.list_products()) == 1
        with pytest.raises(NotFoundError):
            manager.get_by_id("a")

    def test_persists(self):
        manager, repo = _setup([_product("a", "A"), _product("b", "B")])
        manager.delete("b")
        assert [p.id for p in repo.stored] == ["a"]

    def test_unknown_id_raises_and_keeps_catalog(self):
        manager, repo = _setup([_product("a", "A")])
        with pytest.raises(NotFoundError):
            manager.delete("nope")
        assert len(manager.list_products()) == 1
        assert repo.save_count == 0

    def test_code_can_be_reused_after_delete(self):
        manager, _ = _setup([_product("a", "A")])
        manager.delete("a")
        assert _add(manager, "A").code == "A"


class SlowProductRepository(FakeProductRepository):
    """Fake whose writes take long enough for other threads to run."""

    def save(self, products):
        time.sleep(0.01)
        return super().save(products)


class TestConcurrentMutations:

    def _race(self, workers: int, action) -> tuple[list, list]:
        barrier = threading.Barrier(workers)
        results, errors = [], []

        def run(i):
            barrier.wait()
            try:
                results.append(action(i))
            except Exception as exc:
                errors.append(exc)

        threads = [threading.Thread(target=run, args=(i,)) for i in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        return results, errors

    def test_same_code_created_once(self):
        repo = SlowProductRepository([])
        manager = CatalogManager(repo)

        results, errors = self._race(8, lambda i: _add(manager, "SAME", title=f"Racer {i}"))

        assert len(results) == 1
        assert len(errors) == 7
        assert all(isinstance(e, DuplicateCodeError) for e in errors)
        assert [p.code for p in manager.list_products()] == ["SAME"]
        assert repo.save_count == 1

    def test_updates_to_same_code_applied_once(self):
        repo = SlowProductRepository([_product(str(i), f"C{i}") for i in range(6)])
        manager = CatalogManager(repo)

        results, errors = self._race(6, lambda i: manager.update(str(i), {"code": "TAKEN"}))

        assert len(results) == 1
        assert all(isinstance(e, DuplicateCodeError) for e in errors)
        assert [p.code for p in manager.list_products()].count("TAKEN") == 1
        assert [p.code for p in repo.stored].count("TAKEN") == 1
