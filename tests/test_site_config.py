import pytest

from core.exceptions import ConflictError
from core.object_storage import StoredObject
from services.site_config import CONFIG_COLLECTION, CONFIG_ID, SiteConfigService


@pytest.fixture
def site(store, storage, service_kwargs):
    return SiteConfigService(store, storage, **service_kwargs)


async def test_missing_config_answers_defaults_uncached(store, site):
    config = await site.get_config()
    assert config.name == "Believe in the Designs"
    assert site.config_cache.peek() is None
    await site.get_config()
    assert store.calls["get"] == 2


async def test_stored_config_is_cached(store, site):
    await store.set(CONFIG_COLLECTION, CONFIG_ID, {"name": "Night Shop"})
    assert (await site.get_config()).name == "Night Shop"
    assert (await site.get_config()).hero.button_text == "Shop Now"
    assert store.calls["get"] == 1


async def test_update_creates_document_from_defaults(store, site):
    await site.update_config({"name": "Night Shop"})
    data = (await store.get(CONFIG_COLLECTION, CONFIG_ID)).data
    assert data["name"] == "Night Shop"
    assert data["hero"]["buttonText"] == "Shop Now"
    assert data["updatedAt"].endswith("Z")


async def test_update_merges_into_existing(store, site):
    await store.set(CONFIG_COLLECTION, CONFIG_ID, {"name": "Old", "logo": "/logo.png"})
    await site.get_config()
    await site.update_config({"name": "New"})
    assert site.config_cache.peek() is None
    config = await site.get_config()
    assert config.name == "New"
    assert config.logo == "/logo.png"


async def test_hero_upload_keeps_hero_text(store, storage, site):
    upload = StoredObject(filename="Banner.PNG", content=b"png", content_type="image/png")
    await site.update_config({}, hero_image=upload)
    config = await site.get_config()
    assert config.hero.image == storage.url_for("site/hero.png")
    assert config.hero.title == "Premium Quality Apparel"


async def test_logo_upload(site, storage):
    await site.update_config({}, logo=StoredObject(filename="logo.svg", content=b"<svg/>"))
    assert (await site.get_config()).logo == storage.url_for("site/logo.svg")


async def test_default_navigation_when_empty(site):
    items = await site.get_navigation()
    assert [i.id for i in items] == ["home", "products", "categories", "about", "contact"]
    assert site.navigation.cache.peek() is None


async def test_navigation_append_and_soft_delete(store, site):
    await store.set("navigation", "home", {"title": "Home", "url": "/", "order": 1})
    await store.set("navigation", "shop", {"title": "Shop", "url": "/products", "order": 4})
    new_id = await site.create_navigation_item({"title": "Blog", "url": "/blog"})
    assert (await store.get("navigation", new_id)).data["order"] == 5

    await site.delete_navigation_item("shop")
    assert [i.title for i in await site.get_navigation()] == ["Home", "Blog"]
    assert (await store.get("navigation", "shop")).data["deleted"] is True


async def test_page_slug_must_be_unique(site):
    await site.create_page({"title": "About", "slug": "about"})
    with pytest.raises(ConflictError):
        await site.create_page({"title": "About again", "slug": "about"})


async def test_soft_deleted_page_frees_slug(site):
    page_id = await site.create_page({"title": "About", "slug": "about"})
    await site.delete_page(page_id)
    assert await site.get_pages() == []
    await site.create_page({"title": "About v2", "slug": "about"})
    assert (await site.get_page_by_slug("about")).title == "About v2"


async def test_update_page_slug_conflict(site):
    await site.create_page({"title": "About", "slug": "about"})
    faq = await site.create_page({"title": "FAQ", "slug": "faq"})
    with pytest.raises(ConflictError):
        await site.update_page(faq, {"slug": "about"})
    await site.update_page(faq, {"slug": "faq", "content": "Q&A"})


async def test_page_by_slug_uses_fresh_slot(store, site):
    await store.set("pages", "p1", {"title": "Terms", "slug": "terms"})
    await site.get_pages()
    lists_before = store.calls["list"]
    assert (await site.get_page_by_slug("terms")).id == "p1"
    assert store.calls["list"] == lists_before

    assert await site.get_page_by_slug("missing") is None
    assert store.calls["list"] == lists_before + 1


async def test_clear_cache_clears_all_slots(store, site):
    await store.set(CONFIG_COLLECTION, CONFIG_ID, {"name": "Shop"})
    await store.set("pages", "p1", {"title": "Terms", "slug": "terms"})
    await store.set("navigation", "home", {"title": "Home", "order": 1})
    await site.get_config()
    await site.get_pages()
    await site.get_navigation()
    site.clear_cache()
    assert site.config_cache.peek() is None
    assert site.pages.cache.peek() is None
    assert site.navigation.cache.peek() is None
