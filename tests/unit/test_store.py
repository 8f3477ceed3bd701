"""Unit tests for passport stores (temple_passport/progression/store.py)"""
import pytest

from temple_passport.exceptions import StorageError
from temple_passport.models.events import CheckIn
from temple_passport.progression.store import InMemoryProgressionStore, JsonFileProgressionStore


@pytest.fixture
def checked_in_state(coordinator, fresh_state, local_time, start_date):
    """Passport after one check-in (has records, transactions and achievements)"""
    return coordinator.apply(CheckIn(temple_id="temple_a", timestamp=local_time(start_date)), fresh_state).state


# ============================================================================
# In-Memory Store Tests
# ============================================================================

def test_memory_store_missing_user(memory_store):
    """Test unknown user loads as None"""
    assert memory_store.load("nobody") is None


def test_memory_store_returns_copies(memory_store, checked_in_state, test_user_id):
    """Test mutating a loaded passport does not touch the stored one"""
    memory_store.save(checked_in_state)

    loaded = memory_store.load(test_user_id)
    loaded.merit_balance = 9999

    assert memory_store.load(test_user_id).merit_balance == checked_in_state.merit_balance
    assert memory_store.user_ids() == [test_user_id]


# ============================================================================
# JSON File Store Tests
# ============================================================================

def test_json_store_save_and_load(tmp_path, checked_in_state, test_user_id):
    """Test passport survives a save/load cycle"""
    store = JsonFileProgressionStore(tmp_path)
    store.save(checked_in_state)

    loaded = store.load(test_user_id)

    assert loaded == checked_in_state
    assert (tmp_path / "passports" / f"{test_user_id}.json").exists()


def test_json_store_leaves_no_temp_files(tmp_path, checked_in_state):
    """Test atomic writes clean up after themselves"""
    store = JsonFileProgressionStore(tmp_path)
    store.save(checked_in_state)
    store.save(checked_in_state)

    assert list((tmp_path / "passports").glob(".passport-*")) == []


def test_json_store_missing_user(tmp_path):
    """Test unknown user loads as None"""
    assert JsonFileProgressionStore(tmp_path).load("nobody") is None


def test_json_store_sanitizes_user_id(tmp_path, coordinator):
    """Test user ids cannot escape the data directory"""
    store = JsonFileProgressionStore(tmp_path)
    store.save(coordinator.create_state("../evil/user"))

    files = list((tmp_path / "passports").iterdir())
    assert [f.name for f in files] == ["..%2Fevil%2Fuser.json"]
    assert store.load("../evil/user").user_id == "../evil/user"


def test_json_store_corrupt_file(tmp_path, test_user_id):
    """Test unreadable passport raises StorageError"""
    path = tmp_path / "passports" / f"{test_user_id}.json"
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageError) as exc_info:
        JsonFileProgressionStore(tmp_path).load(test_user_id)

    assert exc_info.value.operation == "load_passport"
    assert exc_info.value.cause is not None


def test_json_store_similar_ids_do_not_collide(tmp_path, coordinator):
    """Test ids differing only in punctuation keep separate passports"""
    store = JsonFileProgressionStore(tmp_path)
    dotted = coordinator.create_state("user.1").model_copy(update={"merit_balance": 500})
    store.save(dotted)

    assert store.load("user_1") is None
    assert store.load("user@1") is None

    store.save(coordinator.create_state("user_1"))

    assert store.load("user.1").merit_balance == 500
    assert store.load("user_1").merit_balance == 0
    assert len(list((tmp_path / "passports").glob("*.json"))) == 2


def test_json_store_rejects_foreign_passport(tmp_path, coordinator, test_user_id):
    """Test a file holding another user's passport is never handed out"""
    store = JsonFileProgressionStore(tmp_path)
    store.save(coordinator.create_state("someone_else"))
    (tmp_path / "passports" / "someone_else.json").rename(tmp_path / "passports" / f"{test_user_id}.json")

    with pytest.raises(StorageError) as exc_info:
        store.load(test_user_id)

    assert exc_info.value.context["stored_user_id"] == "someone_else"
