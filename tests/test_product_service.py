"""
Catalog API — Product Service Unit Tests
==========================================

What:  Tests for ProductService business logic.
How:   ProductRepository is patched; the db session is a mock that is only
       passed through.

What we test:
    ✅ Listing composes filter, sort and page into one repository call
    ✅ Bad query values fail before the repository is touched
    ✅ Create: sku pre-check, vendor resolution, 401 without identity
    ✅ Update: sku check only when the sku actually changes
    ✅ Malformed ids are 404s
    ✅ Empty suggestion queries never reach the store
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from catalog_api.exceptions import (
    AuthenticationError,
    DatabaseError,
    DuplicateSkuError,
    NotFoundError,
    ValidationError,
)
from catalog_api.query.filters import FEATURED_FILTER
from catalog_api.query.sorting import DEFAULT_SORT, SortField, SortSpec
from catalog_api.schemas.product import ProductCreate, ProductUpdate
from catalog_api.services.product_service import ProductService, parse_product_id

REPO_PATH = "catalog_api.services.product_service.ProductRepository"


def _stored(make_product, **overrides):
    """A Product as it looks after a round trip through the store."""
    fields = {
        "id": uuid.uuid4(),
        "images": [],
        "tags": [],
        "features": [],
        "specifications": {},
        "rating_average": 0.0,
        "rating_count": 0,
    }
    fields.update(overrides)
    return make_product(**fields)


def _mock_repo(mock_cls):
    repo = MagicMock()
    repo.find = AsyncMock(return_value=[])
    repo.count = AsyncMock(return_value=0)
    repo.search = AsyncMock(return_value=[])
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_by_sku = AsyncMock(return_value=None)
    repo.update = AsyncMock()
    repo.soft_delete = AsyncMock()

    async def persist(product):
        # What a flush would fill in
        now = datetime.now(timezone.utc)
        product.id = uuid.uuid4()
        product.rating_average = 0.0
        product.rating_count = 0
        product.created_at = now
        product.updated_at = now
        return product

    repo.save = AsyncMock(side_effect=persist)
    mock_cls.return_value = repo
    return repo


class TestListProducts:
    """Tests for the filtered listing."""

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_passes_filter_sort_and_page(self, mock_db_session, make_product):
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            repo.find.return_value = [_stored(make_product, vendor=None)]
            repo.count.return_value = 7

            result = await self.service.list_products(
                mock_db_session,
                {"minPrice": "10", "sortBy": "price_asc", "page": "2", "limit": "5"},
            )

        args, kwargs = repo.find.call_args
        product_filter, sort = args
        assert product_filter.min_price == 10.0
        assert sort == SortSpec(SortField.PRICE, descending=False)
        assert kwargs == {"skip": 5, "limit": 5, "with_vendor": True}
        repo.count.assert_awaited_once_with(product_filter)

        assert result.success is True
        assert len(result.data) == 1
        assert result.pagination.current == 2
        assert result.pagination.total_pages == 2
        assert result.pagination.has_prev is True
        assert result.pagination.has_next is False

    @pytest.mark.asyncio
    async def test_defaults(self, mock_db_session):
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            result = await self.service.list_products(mock_db_session, {})

        _, kwargs = repo.find.call_args
        assert kwargs["skip"] == 0
        assert kwargs["limit"] == 12
        assert repo.find.call_args.args[1] == DEFAULT_SORT
        assert result.data == []
        assert result.pagination.total_pages == 0

    @pytest.mark.asyncio
    async def test_bad_price_fails_before_query(self, mock_db_session):
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            with pytest.raises(ValidationError):
                await self.service.list_products(mock_db_session, {"minPrice": "abc"})

        repo.find.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bad_page_fails_before_query(self, mock_db_session):
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            with pytest.raises(ValidationError):
                await self.service.list_products(mock_db_session, {"page": "0"})

        repo.find.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_becomes_database_error(self, mock_db_session):
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            repo.find.side_effect = OperationalError("SELECT", {}, Exception("down"))

            with pytest.raises(DatabaseError) as exc_info:
                await self.service.list_products(mock_db_session, {})

        assert "SELECT" not in exc_info.value.message


class TestGetProduct:

    def setup_method(self):
        self.service = ProductService()

    def test_parse_product_id_rejects_garbage(self):
        with pytest.raises(NotFoundError):
            parse_product_id("not-a-uuid")

    @pytest.mark.asyncio
    async def test_malformed_id_never_queries(self, mock_db_session):
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            with pytest.raises(NotFoundError):
                await self.service.get_product(mock_db_session, "12345")

        repo.get_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_id(self, mock_db_session):
        with patch(REPO_PATH) as mock_cls:
            _mock_repo(mock_cls)
            with pytest.raises(NotFoundError) as exc_info:
                await self.service.get_product(mock_db_session, str(uuid.uuid4()))

        assert exc_info.value.message == "Product not found"

    @pytest.mark.asyncio
    async def test_loads_vendor_and_reviews(self, mock_db_session, make_product):
        product = _stored(make_product, vendor=None, reviews=[])
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            repo.get_by_id.return_value = product

            result = await self.service.get_product(mock_db_session, str(product.id))

        repo.get_by_id.assert_awaited_once_with(
            product.id, with_vendor=True, with_reviews=True
        )
        assert result.data.id == product.id
        assert result.data.reviews == []


class TestCreateProduct:

    def setup_method(self):
        self.service = ProductService()
        self.vendor_id = uuid.uuid4()

    @pytest.mark.asyncio
    async def test_vendor_defaults_to_caller(self, mock_db_session):
        payload = ProductCreate(name="Desk Lamp", price=25, category="home")
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            result = await self.service.create_product(
                mock_db_session, payload, user_id=self.vendor_id
            )

        saved = repo.save.call_args.args[0]
        assert saved.vendor_id == self.vendor_id
        assert saved.is_active is True
        assert result.data.name == "Desk Lamp"
        assert result.data.is_active is True

    @pytest.mark.asyncio
    async def test_explicit_vendor_wins(self, mock_db_session):
        other = uuid.uuid4()
        payload = ProductCreate(name="Desk Lamp", price=25, category="home", vendor=other)
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            await self.service.create_product(mock_db_session, payload, user_id=self.vendor_id)

        assert repo.save.call_args.args[0].vendor_id == other

    @pytest.mark.asyncio
    async def test_no_vendor_and_no_caller(self, mock_db_session):
        payload = ProductCreate(name="Desk Lamp", price=25, category="home")
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            with pytest.raises(AuthenticationError):
                await self.service.create_product(mock_db_session, payload, user_id=None)

        repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_sku_rejected_before_save(self, mock_db_session, make_product):
        payload = ProductCreate(name="TV", price=499, category="electronics", sku="TV-001")
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            repo.get_by_sku.return_value = _stored(make_product, sku="TV-001")

            with pytest.raises(DuplicateSkuError) as exc_info:
                await self.service.create_product(
                    mock_db_session, payload, user_id=self.vendor_id
                )

        assert exc_info.value.message == "SKU already exists"
        repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_sku_skips_lookup(self, mock_db_session):
        payload = ProductCreate(name="Mug", price=8, category="home")
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            await self.service.create_product(mock_db_session, payload, user_id=self.vendor_id)

        repo.get_by_sku.assert_not_awaited()


class TestUpdateProduct:

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_only_provided_fields_are_written(self, mock_db_session, make_product):
        product = _stored(make_product, sku="MUG-1")
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            repo.get_by_id.return_value = product

            await self.service.update_product(
                mock_db_session, str(product.id), ProductUpdate(price=12.5)
            )

        repo.update.assert_awaited_once_with(product, {"price": 12.5})

    @pytest.mark.asyncio
    async def test_unchanged_sku_skips_uniqueness_check(self, mock_db_session, make_product):
        product = _stored(make_product, sku="MUG-1")
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            repo.get_by_id.return_value = product

            await self.service.update_product(
                mock_db_session, str(product.id), ProductUpdate(sku="MUG-1", stock=3)
            )

        repo.get_by_sku.assert_not_awaited()
        repo.update.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_sku_taken_by_another_product(self, mock_db_session, make_product):
        product = _stored(make_product, sku="MUG-1")
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            repo.get_by_id.return_value = product
            repo.get_by_sku.return_value = _stored(make_product, sku="MUG-2")

            with pytest.raises(DuplicateSkuError):
                await self.service.update_product(
                    mock_db_session, str(product.id), ProductUpdate(sku="MUG-2")
                )

        repo.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_vendor_maps_to_vendor_id(self, mock_db_session, make_product):
        product = _stored(make_product)
        new_vendor = uuid.uuid4()
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            repo.get_by_id.return_value = product

            await self.service.update_product(
                mock_db_session, str(product.id), ProductUpdate(vendor=new_vendor)
            )

        repo.update.assert_awaited_once_with(product, {"vendor_id": new_vendor})

    @pytest.mark.asyncio
    async def test_unknown_id(self, mock_db_session):
        with patch(REPO_PATH) as mock_cls:
            _mock_repo(mock_cls)
            with pytest.raises(NotFoundError):
                await self.service.update_product(
                    mock_db_session, str(uuid.uuid4()), ProductUpdate(price=1)
                )


class TestDeleteProduct:

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_soft_delete(self, mock_db_session, make_product):
        product = _stored(make_product)
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            repo.get_by_id.return_value = product

            result = await self.service.delete_product(mock_db_session, str(product.id))

        repo.soft_delete.assert_awaited_once_with(product)
        assert result.success is True
        assert result.message == "Product deleted successfully"

    @pytest.mark.asyncio
    async def test_malformed_id(self, mock_db_session):
        with pytest.raises(NotFoundError):
            await self.service.delete_product(mock_db_session, "abc")


class TestShelves:
    """Suggestions, category listing and featured."""

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("q", [None, ""])
    async def test_empty_query_never_reaches_store(self, mock_db_session, q):
        with patch(REPO_PATH) as mock_cls:
            result = await self.service.search_suggestions(mock_db_session, q)

        mock_cls.assert_not_called()
        assert result.success is True
        assert result.data == []

    @pytest.mark.asyncio
    async def test_suggestions_limited_to_ten(self, mock_db_session):
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            await self.service.search_suggestions(mock_db_session, "lamp")

        repo.search.assert_awaited_once_with("lamp", limit=10)

    @pytest.mark.asyncio
    async def test_category_listing(self, mock_db_session, make_product):
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            repo.find.return_value = [_stored(make_product)]
            repo.count.return_value = 13

            result = await self.service.list_by_category(
                mock_db_session, "Electronics", page="2"
            )

        product_filter, sort = repo.find.call_args.args
        assert product_filter.category == "electronics"
        assert sort == DEFAULT_SORT
        assert repo.find.call_args.kwargs == {"skip": 12, "limit": 12}
        dumped = result.pagination.model_dump(by_alias=True)
        assert dumped == {"current": 2, "totalPages": 2, "totalProducts": 13}

    @pytest.mark.asyncio
    async def test_featured(self, mock_db_session):
        with patch(REPO_PATH) as mock_cls:
            repo = _mock_repo(mock_cls)
            result = await self.service.list_featured(mock_db_session)

        repo.find.assert_awaited_once_with(FEATURED_FILTER, DEFAULT_SORT, limit=8)
        assert result.data == []


class TestStoreFailures:
    """Every operation reports a store failure as DatabaseError."""

    def setup_method(self):
        self.service = ProductService()
        self.failure = OperationalError("SELECT 1", {}, Exception("connection lost"))

    def _failing_repo(self, mock_cls):
        repo = _mock_repo(mock_cls)
        for name in ("find", "count", "search", "get_by_id", "get_by_sku", "save"):
            getattr(repo, name).side_effect = self.failure
        return repo

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation, kwargs",
        [
            ("list_products", {"params": {}}),
            ("get_product", {"product_id": str(uuid.uuid4())}),
            ("search_suggestions", {"q": "lamp"}),
            ("list_by_category", {"category": "home"}),
            ("list_featured", {}),
            ("update_product", {"product_id": str(uuid.uuid4()), "payload": ProductUpdate(price=1)}),
            ("delete_product", {"product_id": str(uuid.uuid4())}),
        ],
    )
    async def test_wrapped(self, mock_db_session, operation, kwargs):
        with patch(REPO_PATH) as mock_cls:
            self._failing_repo(mock_cls)
            with pytest.raises(DatabaseError) as exc_info:
                await getattr(self.service, operation)(mock_db_session, **kwargs)

        assert exc_info.value.context["error_type"] == "OperationalError"
        assert "SELECT" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_create_wrapped(self, mock_db_session):
        payload = ProductCreate(name="Mug", price=8, category="home", sku="MUG-1")
        with patch(REPO_PATH) as mock_cls:
            self._failing_repo(mock_cls)
            with pytest.raises(DatabaseError):
                await self.service.create_product(mock_db_session, payload, user_id=uuid.uuid4())

    @pytest.mark.asyncio
    async def test_own_errors_pass_through(self, mock_db_session):
        with patch(REPO_PATH) as mock_cls:
            _mock_repo(mock_cls)
            with pytest.raises(NotFoundError):
                await self.service.delete_product(mock_db_session, str(uuid.uuid4()))
