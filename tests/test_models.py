"""Tests for data models."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from ttrak.models import (
    DataStore,
    GitHubIntegrationConfig,
    GitHubItemType,
    GitHubMetadata,
    LinearIntegrationConfig,
    ProviderName,
    Task,
    TaskPriority,
    TaskSource,
    TaskStatus,
    TtrakConfig,
)
from ttrak.models.task import TITLE_MAX_LENGTH, UNTITLED, clip_title

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)


def local_task(task_id: str = "LOCAL-1", **kwargs) -> Task:
    title = kwargs.pop("title", "Write docs")
    return Task(id=task_id, title=title, created_at=NOW, updated_at=NOW, **kwargs)


class TestTask:
    """Tests for the Task model."""

    def test_defaults(self):
        """New tasks are local todo tasks without priority."""
        task = local_task()
        assert task.status == TaskStatus.TODO
        assert task.priority == TaskPriority.NONE
        assert task.source == TaskSource.LOCAL
        assert task.tags == []
        assert task.is_local
        assert task.local_number == 1

    @pytest.mark.parametrize("task_id", ["LOCAL-1", "GH-42", "ENG-7", "LIN-100"])
    def test_valid_ids(self, task_id: str):
        """Ids are an uppercase prefix and a number."""
        assert Task(
            id=task_id,
            title="x",
            source=TaskSource.LOCAL if task_id.startswith("LOCAL") else TaskSource.GITHUB,
            external_id=None if task_id.startswith("LOCAL") else "github:o/r:1",
            created_at=NOW,
            updated_at=NOW,
        ).id == task_id

    @pytest.mark.parametrize("task_id", ["local-1", "GH42", "GH-", "gh-1", "GH-1a", ""])
    def test_invalid_ids(self, task_id: str):
        """Malformed ids are rejected."""
        with pytest.raises(ValidationError):
            local_task(task_id)

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            local_task(title="")

    def test_title_max_length(self):
        """Titles are limited to 200 characters."""
        assert len(local_task(title="x" * 200).title) == 200
        with pytest.raises(ValidationError):
            local_task(title="x" * 201)

    def test_synced_task_requires_external_id(self):
        """Non-local tasks must carry an external id."""
        with pytest.raises(ValidationError, match="externalId"):
            Task(id="GH-1", title="x", source=TaskSource.GITHUB, created_at=NOW, updated_at=NOW)

    def test_local_task_rejects_external_id(self):
        with pytest.raises(ValidationError, match="externalId"):
            local_task(external_id="github:o/r:1")

    def test_naive_datetimes_become_utc(self):
        """Naive timestamps are treated as UTC so they compare with aware ones."""
        task = Task(
            id="LOCAL-1",
            title="x",
            created_at=datetime(2025, 1, 1, 10, 0),
            updated_at=datetime(2025, 1, 1, 10, 0),
        )
        assert task.updated_at.tzinfo is not None
        assert task.updated_at < NOW

    def test_local_number_none_for_synced(self):
        task = Task(
            id="GH-5",
            title="x",
            source=TaskSource.GITHUB,
            external_id="github:o/r:5",
            created_at=NOW,
            updated_at=NOW,
        )
        assert task.local_number is None
        assert not task.is_local

    def test_url_from_metadata(self):
        task = Task(
            id="GH-5",
            title="x",
            source=TaskSource.GITHUB,
            external_id="github:o/r:5",
            created_at=NOW,
            updated_at=NOW,
            github=GitHubMetadata(
                type=GitHubItemType.PULL_REQUEST,
                number=5,
                repo="o/r",
                url="https://github.com/o/r/pull/5",
                synced_at=NOW,
            ),
        )
        assert task.url == "https://github.com/o/r/pull/5"
        assert task.github is not None
        assert task.github.is_pull_request


class TestClipTitle:
    """Tests for fitting remote titles into task bounds."""

    def test_short_title_unchanged(self):
        assert clip_title("  Fix login  ") == "Fix login"

    def test_long_title_cut_with_ellipsis(self):
        title = clip_title("a" * 256)
        assert len(title) == TITLE_MAX_LENGTH
        assert title.endswith("…")
        local_task(title=title)

    def test_exact_limit_kept(self):
        assert clip_title("b" * TITLE_MAX_LENGTH) == "b" * TITLE_MAX_LENGTH

    @pytest.mark.parametrize("title", [None, "", "   "])
    def test_blank_title_placeholder(self, title):
        assert clip_title(title) == UNTITLED


class TestTaskDocument:
    """Tests for the on-disk shape of tasks."""

    def test_camel_case_keys(self):
        """Documents use camelCase keys and omit unset optionals."""
        doc = Task(
            id="ENG-7",
            title="Fix login",
            source=TaskSource.LINEAR,
            external_id="linear:team-1:abc",
            status=TaskStatus.IN_PROGRESS,
            created_at=NOW,
            updated_at=NOW,
        ).to_document()

        assert doc["externalId"] == "linear:team-1:abc"
        assert doc["status"] == "inProgress"
        assert doc["createdAt"].startswith("2025-01-15T12:00:00")
        assert "updatedAt" in doc
        assert "description" not in doc
        assert "github" not in doc

    def test_document_round_trip(self):
        """A task loads back equal from its own document."""
        task = local_task(description="Longer text", tags=["docs"], priority=TaskPriority.HIGH)
        assert Task.model_validate(task.to_document()) == task

    def test_populate_by_field_name_or_alias(self):
        """Both camelCase aliases and snake_case names are accepted."""
        by_alias = Task.model_validate(
            {"id": "LOCAL-1", "title": "x", "createdAt": NOW, "updatedAt": NOW}
        )
        by_name = Task.model_validate(
            {"id": "LOCAL-1", "title": "x", "created_at": NOW, "updated_at": NOW}
        )
        assert by_alias == by_name


class TestDataStore:
    """Tests for the persisted collection."""

    def test_empty_store(self):
        store = DataStore()
        assert store.version == 1
        assert store.tasks == []
        assert store.to_document()["$schema"].endswith("data.schema.json")

    def test_find_and_index_of(self):
        store = DataStore(tasks=[local_task("LOCAL-1"), local_task("LOCAL-2")])
        assert store.find("LOCAL-2") is store.tasks[1]
        assert store.index_of("LOCAL-2") == 1
        assert store.find("LOCAL-9") is None
        assert store.index_of("LOCAL-9") is None

    def test_loads_schema_key(self):
        store = DataStore.model_validate({"$schema": "x", "version": 1, "tasks": []})
        assert store.schema_ref == "x"
        assert store.to_document()["$schema"] == "x"


class TestTtrakConfig:
    """Tests for configuration snapshots."""

    def test_default_has_no_providers(self):
        config = TtrakConfig.default()
        assert config.configured_providers == []
        assert not config.sync_enabled
        assert config.last_sync(ProviderName.GITHUB) is None
        assert config.sync_interval(ProviderName.LINEAR) is None

    def test_presence_means_configured(self):
        """A provider block, even an empty one, counts as configured."""
        config = TtrakConfig.model_validate({"integrations": {"linear": {}}})
        assert config.configured_providers == [ProviderName.LINEAR]
        assert config.is_configured(ProviderName.LINEAR)
        assert not config.is_configured(ProviderName.GITHUB)
        assert config.sync_interval(ProviderName.LINEAR) == 30

    def test_interval_must_be_positive(self):
        with pytest.raises(ValidationError):
            GitHubIntegrationConfig(sync_interval=0)

    def test_with_last_sync_returns_new_snapshot(self):
        """Recording a sync never mutates the original config."""
        config = TtrakConfig.model_validate(
            {"integrations": {"github": {"repo": "o/r"}, "sync": {"enabled": True}}}
        )
        updated = config.with_last_sync(ProviderName.GITHUB, NOW)

        assert updated.last_sync(ProviderName.GITHUB) == NOW
        assert config.last_sync(ProviderName.GITHUB) is None
        assert updated.sync_enabled

    def test_with_integrations_enables_sync(self):
        config = TtrakConfig.default().with_integrations(
            GitHubIntegrationConfig(token="t", repo="o/r"), None
        )
        assert config.sync_enabled
        assert config.configured_providers == [ProviderName.GITHUB]

    def test_with_integrations_keeps_bookkeeping(self):
        config = (
            TtrakConfig.default()
            .with_integrations(None, LinearIntegrationConfig(api_key="k"))
            .with_last_sync(ProviderName.LINEAR, NOW)
        )
        updated = config.with_integrations(None, LinearIntegrationConfig(api_key="k2"))
        assert updated.last_sync(ProviderName.LINEAR) == NOW

    def test_with_no_integrations_drops_sync(self):
        config = TtrakConfig.default().with_integrations(
            None, LinearIntegrationConfig(api_key="k")
        )
        cleared = config.with_integrations(None, None)
        assert cleared.integrations.sync is None
        assert not cleared.sync_enabled

    def test_owner_and_name(self):
        assert GitHubIntegrationConfig(repo="octo/hello").owner_and_name == ("octo", "hello")
        assert GitHubIntegrationConfig(repo="octo").owner_and_name is None
        assert GitHubIntegrationConfig(repo="a/b/c").owner_and_name is None

    def test_document_round_trip(self):
        config = TtrakConfig.default().with_integrations(
            GitHubIntegrationConfig(token="t", repo="o/r"), None
        ).with_last_sync(ProviderName.GITHUB, NOW)
        assert TtrakConfig.model_validate(config.to_document()) == config
