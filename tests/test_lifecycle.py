"""
Tests for create and update through the lifecycle coordinator
"""
import threading
from datetime import date
from unittest.mock import patch

import pytest

from standards.errors import ConflictError, InvalidVersionError, NotFoundError, StoreIOError, ValidationError
from standards.lifecycle import LifecycleCoordinator
from value_objects import VersionBump
from tests.conftest import TODAY, standard_text

ACTIVE = "standard-backend-development-x-active.md"
DEPRECATED = "standard-backend-development-x-deprecated.md"


class TestCreate:

    def test_create_stamps_version_and_dates(self, coordinator, new_metadata):
        standard = coordinator.create(new_metadata, "# X\n\nbody", "x")

        assert standard.path == ACTIVE
        assert standard.metadata.version == "1.0.0"
        assert standard.metadata.created == TODAY
        assert standard.metadata.updated == TODAY

    def test_created_file_is_indexed_and_on_disk(self, coordinator, index, store, new_metadata):
        coordinator.create(new_metadata, "# X\n\nbody", "x")

        assert index.get_by_path(ACTIVE).content == "# X\n\nbody"
        assert store.read(ACTIVE).metadata.version == "1.0.0"

    def test_slug_from_title_when_no_filename(self, coordinator, new_metadata):
        standard = coordinator.create(new_metadata, "# Error Handling\n\nbody")
        assert standard.path == "standard-backend-development-error-handling-active.md"

    def test_filename_extension_is_ignored(self, coordinator, new_metadata):
        assert coordinator.create(new_metadata, "body", "x.md").path == ACTIVE

    def test_plural_type_normalized(self, coordinator, new_metadata):
        new_metadata['type'] = 'standards'
        assert coordinator.create(new_metadata, "body", "x").metadata.type == "standard"

    def test_conflict(self, coordinator, new_metadata):
        coordinator.create(new_metadata, "body", "x")
        with pytest.raises(ConflictError) as exc_info:
            coordinator.create(new_metadata, "other body", "x")
        assert exc_info.value.path == ACTIVE

    def test_conflict_leaves_existing_untouched(self, coordinator, store, new_metadata):
        coordinator.create(new_metadata, "original", "x")
        with pytest.raises(ConflictError):
            coordinator.create(new_metadata, "replacement", "x")
        assert store.read(ACTIVE).content == "original"

    def test_empty_content(self, coordinator, new_metadata, standards_dir):
        with pytest.raises(ValidationError) as exc_info:
            coordinator.create(new_metadata, "   ", "x")
        assert exc_info.value.field == "content"
        assert list(standards_dir.iterdir()) == []

    def test_missing_field(self, coordinator, new_metadata, index):
        del new_metadata['author']
        with pytest.raises(ValidationError):
            coordinator.create(new_metadata, "body", "x")
        assert index.count() == 0

    def test_invalid_enum(self, coordinator, new_metadata):
        new_metadata['tier'] = 'mobile'
        with pytest.raises(ValidationError):
            coordinator.create(new_metadata, "body", "x")

    def test_no_slug(self, coordinator, new_metadata):
        with pytest.raises(ValidationError):
            coordinator.create(new_metadata, "!!!")


class TestUpdate:

    @pytest.fixture
    def existing(self, coordinator, new_metadata):
        return coordinator.create(new_metadata, "# X\n\nbody", "x")

    def test_content_update_bumps_patch(self, coordinator, existing):
        standard = coordinator.update(ACTIVE, content="new body")

        assert standard.path == ACTIVE
        assert standard.content == "new body"
        assert standard.metadata.version == "1.0.1"

    def test_bump_kinds(self, coordinator, existing):
        assert coordinator.update(ACTIVE, content="a", version_bump=VersionBump.MINOR).metadata.version == "1.1.0"
        assert coordinator.update(ACTIVE, content="b", version_bump="major").metadata.version == "2.0.0"

    def test_status_change_renames(self, coordinator, index, standards_dir, existing):
        """Deprecating a standard moves it and bumps the version"""
        standard = coordinator.update(
            ACTIVE, metadata={'status': 'deprecated'}, version_bump=VersionBump.MINOR
        )

        assert standard.path == DEPRECATED
        assert standard.metadata.version == "1.1.0"
        assert not (standards_dir / ACTIVE).exists()
        assert (standards_dir / DEPRECATED).exists()
        assert index.get_by_path(ACTIVE) is None
        assert index.get_by_path(DEPRECATED).metadata.status == "deprecated"
        assert index.count() == 1

    def test_tier_change_renames(self, coordinator, standards_dir, existing):
        standard = coordinator.update(ACTIVE, metadata={'tier': 'security'})

        assert standard.path == "standard-security-development-x-active.md"
        assert sorted(p.name for p in standards_dir.iterdir()) == [standard.path]

    def test_rename_conflict_changes_nothing(self, coordinator, store, index, new_metadata, existing):
        coordinator.create(dict(new_metadata, status='deprecated'), "taken", "x")

        with pytest.raises(ConflictError):
            coordinator.update(ACTIVE, metadata={'status': 'deprecated'})

        assert store.read(ACTIVE).metadata.version == "1.0.0"
        assert store.read(DEPRECATED).content == "taken"
        assert index.count() == 2

    def test_content_preserved_on_metadata_update(self, coordinator, existing):
        assert coordinator.update(ACTIVE, metadata={'tags': ['x']}).content == existing.content

    def test_metadata_preserved_on_content_update(self, coordinator, existing):
        metadata = coordinator.update(ACTIVE, content="new").metadata
        assert metadata.tags == existing.metadata.tags
        assert metadata.created == existing.metadata.created

    def test_explicit_version_is_used(self, coordinator, existing):
        assert coordinator.update(ACTIVE, metadata={'version': '3.0.0'}).metadata.version == "3.0.0"

    def test_version_cannot_decrease(self, coordinator, store, existing):
        coordinator.update(ACTIVE, content="a", version_bump="major")
        with pytest.raises(InvalidVersionError):
            coordinator.update(ACTIVE, metadata={'version': '1.5.0'})
        assert store.read(ACTIVE).metadata.version == "2.0.0"

    def test_created_cannot_change(self, coordinator, existing):
        with pytest.raises(ValidationError):
            coordinator.update(ACTIVE, metadata={'created': '2020-01-01'})

    def test_updated_is_today(self, store, index, new_metadata):
        from standards.validator import MetadataValidator
        days = iter([date(2025, 1, 1), date(2025, 6, 1)])
        coordinator = LifecycleCoordinator(store, index, validator=MetadataValidator(clock=lambda: next(days)))
        coordinator.create(new_metadata, "body", "x")

        standard = coordinator.update(ACTIVE, content="new")

        assert standard.metadata.created == date(2025, 1, 1)
        assert standard.metadata.updated == date(2025, 6, 1)

    def test_missing_standard(self, coordinator):
        with pytest.raises(NotFoundError):
            coordinator.update("missing.md", content="x")

    def test_nothing_to_update(self, coordinator, existing):
        with pytest.raises(ValidationError):
            coordinator.update(ACTIVE)

    def test_empty_content(self, coordinator, existing):
        with pytest.raises(ValidationError):
            coordinator.update(ACTIVE, content="")

    def test_update_by_legacy_name(self, coordinator, existing):
        assert coordinator.update("x.md", content="new").path == ACTIVE

    def test_legacy_file_moves_to_canonical_path(self, coordinator, write_file, standards_dir, index):
        write_file("backend/old-name.md", standard_text())
        index.rebuild()

        standard = coordinator.update("backend/old-name.md", content="moved")

        assert standard.path == "standard-backend-development-old-name-active.md"
        assert not (standards_dir / "backend" / "old-name.md").exists()
        assert index.get_by_path("backend/old-name.md").path == standard.path

    def test_out_of_band_deletion(self, coordinator, standards_dir, index, existing):
        (standards_dir / ACTIVE).unlink()
        with pytest.raises(NotFoundError):
            coordinator.update(ACTIVE, content="x")
        assert index.count() == 0


class TestRelocationFailure:

    @pytest.fixture
    def existing(self, coordinator, new_metadata):
        return coordinator.create(new_metadata, "body", "x")

    def test_old_file_kept_when_removal_fails(self, coordinator, store, standards_dir, existing):
        """A failed delete withdraws the new copy"""
        original_remove = store.remove

        def failing_remove(path):
            if path == ACTIVE:
                raise StoreIOError("disk says no")
            return original_remove(path)

        with patch.object(store, 'remove', side_effect=failing_remove):
            with pytest.raises(StoreIOError):
                coordinator.update(ACTIVE, metadata={'status': 'deprecated'})

        assert (standards_dir / ACTIVE).exists()
        assert not (standards_dir / DEPRECATED).exists()

    def test_write_failure_leaves_original(self, coordinator, store, standards_dir, index, existing):
        with patch.object(store, 'write', side_effect=StoreIOError("full")):
            with pytest.raises(StoreIOError):
                coordinator.update(ACTIVE, metadata={'status': 'deprecated'})

        assert (standards_dir / ACTIVE).exists()
        assert index.get_by_path(ACTIVE) is not None


class TestPlanRelocation:

    def test_plan_for_unchanged_path(self, coordinator, new_metadata):
        existing = coordinator.create(new_metadata, "body", "x")
        plan = coordinator.plan_relocation(existing, existing.metadata.with_changes(tags=('y',)))
        assert not plan.moves

    def test_plan_for_status_change(self, coordinator, new_metadata):
        existing = coordinator.create(new_metadata, "body", "x")
        plan = coordinator.plan_relocation(existing, existing.metadata.with_changes(status='draft'))
        assert plan.new_path == "standard-backend-development-x-draft.md"


class TestConcurrentRefresh:

    def test_stale_refresh_cannot_overwrite_update(self, coordinator, store, index, new_metadata):
        """A watcher refresh that read the old file before an update still loses to it"""
        coordinator.create(new_metadata, "# X\n\nold body", "x")
        read_started = threading.Event()
        release = threading.Event()
        original_read = store.read

        def slow_read(path):
            standard = original_read(path)
            if threading.current_thread().name == "watcher":
                read_started.set()
                release.wait(5)
            return standard

        errors = []

        def run_update():
            try:
                coordinator.update(ACTIVE, content="new body")
            except Exception as e:
                errors.append(e)

        with patch.object(store, 'read', side_effect=slow_read):
            watcher = threading.Thread(target=index.refresh, args=(ACTIVE,), name="watcher")
            watcher.start()
            assert read_started.wait(5)

            updater = threading.Thread(target=run_update, name="updater")
            updater.start()
            updater.join(0.2)
            release.set()
            watcher.join(5)
            updater.join(5)

        assert errors == []
        indexed = index.get_by_path(ACTIVE)
        assert indexed.content == "new body"
        assert indexed.metadata.version == "1.0.1"
        assert store.read(ACTIVE).content == "new body"
