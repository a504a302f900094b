from core.config import Settings


def test_settings_create_data_directories(tmp_path):
    storage = tmp_path / "objects" / "nested"
    database = tmp_path / "db" / "store.db"
    settings = Settings(
        storage_root=str(storage),
        database_url=f"sqlite+aiosqlite:///{database}",
        storage_public_url="http://testserver/storage/",
    )
    assert storage.is_dir()
    assert database.parent.is_dir()
    assert settings.storage_public_url == "http://testserver/storage"
