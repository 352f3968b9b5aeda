from time import sleep

from latency_demo import config
from latency_demo.dataset import DAY_MS, Dataset, generate_transactions
from latency_demo.domain.models import Category, Transaction
from latency_demo.utils import profiler

DATASET_SIZE = 10_000
USER_POOL = 100
REFERENCE_MS = 1_700_000_000_000


def test_settings_defaults():
    settings = config.Settings()
    assert settings.server_port == 3000
    assert settings.dataset_size == DATASET_SIZE
    assert settings.dataset_users == USER_POOL
    assert settings.dataset_history_days == 30
    assert settings.recent_window_days == 7
    assert settings.recent_default_limit == 50
    assert settings.slow_mock_delay_ms == 500
    assert settings.slow_mock_sample_size == 10


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("SERVER_PORT", "8080")
    monkeypatch.setenv("SLOW_MOCK_DELAY_MS", "25")
    settings = config.Settings()
    assert settings.server_port == 8080
    assert settings.slow_mock_delay_ms == 25


def test_profile_block_measures_time():
    with profiler.profile_block("sleep") as stats:
        sleep(0.05)
    assert stats.duration_seconds >= 0.05
    assert stats.elapsed_ms >= 50.0
    assert stats.peak_rss_bytes is None


def test_profile_block_samples_resources_when_asked():
    with profiler.profile_block("sampled", sample_resources=True) as stats:
        sleep(0.02)
    assert stats.peak_rss_bytes is not None and stats.peak_rss_bytes > 0
    assert isinstance(stats.cpu_percent, float)


def test_dataset_invariants(dataset: Dataset):
    assert len(dataset) == DATASET_SIZE
    assert [t.id for t in dataset[:3]] == ["T-1", "T-2", "T-3"]
    assert dataset[-1].id == f"T-{DATASET_SIZE}"
    assert len({t.id for t in dataset}) == DATASET_SIZE

    oldest_allowed = dataset.generated_at_ms - 30 * DAY_MS
    valid_users = {f"U-{n}" for n in range(1, USER_POOL + 1)}
    for t in dataset:
        assert t.amount >= 0
        assert round(t.amount, 2) == t.amount
        assert isinstance(t.category, Category)
        assert t.user_id in valid_users
        assert oldest_allowed < t.timestamp <= dataset.generated_at_ms


def test_generate_transactions_is_deterministic_with_seed():
    first = generate_transactions(5, USER_POOL, 30, seed=7, reference_ms=REFERENCE_MS)
    second = generate_transactions(5, USER_POOL, 30, seed=7, reference_ms=REFERENCE_MS)
    assert first == second
    assert all(isinstance(t, Transaction) for t in first)


def test_dataset_is_read_only(dataset: Dataset):
    assert isinstance(dataset.head(10), tuple)
    assert dataset.head(10) == tuple(dataset[:10])


def test_transaction_serializes_with_camel_case(dataset: Dataset):
    payload = dataset[0].model_dump(by_alias=True, mode="json")
    assert set(payload) == {"id", "userId", "amount", "timestamp", "category"}
    assert isinstance(payload["timestamp"], int)
    assert payload["category"] in {"Sales", "Services", "Logistics", "Other"}
