import pytest

from core.exceptions import DocumentNotFoundError
from core.object_storage import StoredObject
from models.catalog import ProductVariant
from services.products import ProductService


@pytest.fixture
def products(store, storage, service_kwargs):
    return ProductService(store, storage, **service_kwargs)


def image(name="shirt.jpg"):
    return StoredObject(filename=name, content=b"\xff\xd8jpeg", content_type="image/jpeg")


async def test_create_sets_defaults_and_uploads_image(store, storage, products):
    product_id = await products.create({"title": "Tee", "price": "$25", "category": "T-Shirts"}, image=image())
    doc = (await store.get("products", product_id)).data
    assert doc["isPublished"] is True
    assert doc["createdAt"].endswith("Z")
    assert storage.owns(doc["image"])
    assert "/products/" in doc["image"]
    assert doc["image"].endswith("_shirt.jpg")


async def test_create_keeps_explicit_unpublished(store, products):
    product_id = await products.create({"title": "Draft", "isPublished": False})
    assert (await store.get("products", product_id)).data["isPublished"] is False


async def test_update_replaces_owned_image(store, storage, products):
    product_id = await products.create({"title": "Tee"}, image=image("old.jpg"))
    old_url = (await store.get("products", product_id)).data["image"]
    old_path = storage._resolve(storage.path_from_url(old_url))
    assert old_path.exists()

    await products.update(product_id, {"title": "Tee v2"}, image=image("new.jpg"))
    data = (await store.get("products", product_id)).data
    assert data["title"] == "Tee v2"
    assert data["image"].endswith("_new.jpg")
    assert not old_path.exists()


async def test_update_with_foreign_image_url_still_succeeds(store, products):
    await store.set("products", "p1", {"title": "Tee", "image": "https://cdn.example.com/x.jpg"})
    await products.update("p1", {}, image=image())
    assert (await store.get("products", "p1")).data["image"].startswith("http://testserver/storage/")


async def test_delete_missing_product_raises(products):
    with pytest.raises(DocumentNotFoundError):
        await products.delete("nope")


async def test_delete_removes_document_and_image(store, storage, products):
    product_id = await products.create({"title": "Tee"}, image=image())
    path = storage._resolve(storage.path_from_url((await store.get("products", product_id)).data["image"]))
    await products.delete(product_id)
    assert await store.get("products", product_id) is None
    assert not path.exists()


async def test_get_by_id_falls_back_to_catalogue(products):
    fallback = await products.get_by_id("2")
    assert fallback.title.endswith("White T-Shirt")
    assert await products.get_by_id("999") is None


async def test_featured_and_category_queries(store, products):
    await store.set("products", "a", {"title": "A", "category": "Hoodies", "featured": True,
                                      "createdAt": "2024-01-01T00:00:00.000000Z"})
    await store.set("products", "b", {"title": "B", "category": "Hoodies", "featured": False,
                                      "createdAt": "2024-01-02T00:00:00.000000Z"})
    assert [p.id for p in await products.get_by_category("Hoodies")] == ["b", "a"]
    assert [p.id for p in await products.get_featured()] == ["a"]


async def test_empty_category_answers_with_matching_fallback(products):
    shirts = await products.get_by_category("T-Shirts")
    assert len(shirts) == 3
    assert await products.get_by_category("Joggers") == []


async def test_search_matches_title_description_and_category(store, products):
    await store.set("products", "a", {"title": "Midnight Hoodie", "category": "Hoodies"})
    await store.set("products", "b", {"title": "Tee", "description": "A midnight blue tee"})
    await store.set("products", "c", {"title": "Shorts", "category": "Men's Shorts"})
    assert {p.id for p in await products.search("MIDNIGHT")} == {"a", "b"}
    assert {p.id for p in await products.search("shorts")} == {"c"}
    assert len(await products.search("  ")) == 3


async def test_update_variants_sets_inventory(store, products):
    await store.set("products", "p1", {"title": "Tee", "inventory": 0})
    await products.update_variants("p1", [
        ProductVariant(id="v1", size="M", stock=4),
        ProductVariant(id="v2", size="L", stock=6),
    ])
    data = (await store.get("products", "p1")).data
    assert data["inventory"] == 10
    assert [v["id"] for v in data["variants"]] == ["v1", "v2"]


async def test_adjust_inventory_floors_at_zero(store, products):
    await store.set("products", "p1", {"title": "Tee", "inventory": 2})
    assert await products.adjust_inventory("p1", -5) == 0
    assert (await store.get("products", "p1")).data["inventory"] == 0


async def test_publish_and_feature_flags(store, products):
    await store.set("products", "p1", {"title": "Tee"})
    await products.set_published("p1", False)
    await products.set_featured("p1", True)
    data = (await store.get("products", "p1")).data
    assert data["isPublished"] is False
    assert data["featured"] is True


async def test_bulk_import_counts_and_clears_cache(store, products):
    await store.set("products", "seed", {"title": "Seed"})
    await products.get_all()
    count = await products.bulk_import([{"title": "One"}, {"title": "Two"}])
    assert count == 2
    assert products.cache.peek() is None
    assert len(await products.get_all()) == 3


async def test_bulk_import_partial_failure_clears_cache_and_raises(store, products, monkeypatch):
    await store.set("products", "seed", {"title": "Seed"})
    await products.get_all()
    original_add = store.add
    calls = {"n": 0}

    async def flaky_add(collection, data):
        calls["n"] += 1
        if calls["n"] == 2:
            raise RuntimeError("write rejected")
        return await original_add(collection, data)

    monkeypatch.setattr(store, "add", flaky_add)
    with pytest.raises(RuntimeError):
        await products.bulk_import([{"title": "One"}, {"title": "Two"}, {"title": "Three"}])
    assert products.cache.peek() is None
    assert len(await products.get_all()) == 2
