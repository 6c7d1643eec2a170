import pytest

from flappy_pushup.errors import StorageUnavailable
from flappy_pushup.personal_best import PersonalBestStore


def test_missing_file_is_zero(tmp_path):
    assert PersonalBestStore(str(tmp_path / 'none.json')).load() == 0


def test_roundtrip_keeps_name(tmp_path):
    store = PersonalBestStore(str(tmp_path / 'best.json'))
    store.save_name('Ada')
    store.save(12)
    assert store.load() == 12
    assert store.load_name() == 'Ada'


def test_corrupt_file_raises_storage_unavailable(tmp_path):
    path = tmp_path / 'best.json'
    path.write_text('{not json')
    store = PersonalBestStore(str(path))
    with pytest.raises(StorageUnavailable):
        store.load()
    assert store.load_name() == ''


def test_unwritable_location(tmp_path):
    store = PersonalBestStore(str(tmp_path / 'missing-dir' / 'best.json'))
    with pytest.raises(StorageUnavailable):
        store.save(3)
    store.save_name('quiet')
