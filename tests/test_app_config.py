import app as app_module


def test_memory_uri_passes_through():
    assert app_module._resolve_database_uri('sqlite://') == app_module.MEMORY_DATABASE_URI


def test_unopenable_database_falls_back_to_memory():
    uri = 'sqlite:////nonexistent-dir/daystrip.db'
    assert app_module._resolve_database_uri(uri) == app_module.MEMORY_DATABASE_URI


def test_unwritable_instance_folder_falls_back_to_memory(monkeypatch):
    def deny(*args, **kwargs):
        raise PermissionError('read-only filesystem')

    monkeypatch.setattr(app_module.os, 'makedirs', deny)
    assert app_module._resolve_database_uri('sqlite:///daystrip.db') == app_module.MEMORY_DATABASE_URI


def test_relative_sqlite_path_is_anchored_in_instance_folder(tmp_path, monkeypatch):
    monkeypatch.setattr(app_module.app, 'instance_path', str(tmp_path))
    resolved = app_module._resolve_database_uri('sqlite:///daystrip.db')
    assert resolved == f"sqlite:///{tmp_path / 'daystrip.db'}"
    assert (tmp_path / 'daystrip.db').exists()
