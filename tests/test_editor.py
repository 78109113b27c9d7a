"""Tests for ScheduleEditor."""

import pytest

from sow_presenter.db.models import ItemType
from sow_presenter.errors import InvalidStateError, NotFoundError, ValidationError
from sow_presenter.presenter.broadcast import topic_for
from sow_presenter.presenter.editor import ScheduleEditor


class TestEditing:
    """Verify entry editing through the editor."""

    def test_add_entry_summary(self, editor, schedule, amazing_grace):
        summary = editor.add_entry(schedule.id, "Song", amazing_grace.id)

        assert summary.item_type == ItemType.SONG
        assert summary.title == "Amazing Grace"
        assert summary.slide_count == 2
        assert summary.position == 0

    def test_add_entry_unknown_type(self, editor, schedule, amazing_grace):
        with pytest.raises(ValidationError):
            editor.add_entry(schedule.id, "hymn", amazing_grace.id)

    def test_add_scripture_from_bible(self, editor, schedule, catalog_client):
        summary = editor.add_scripture_from_bible(schedule.id, None, "Juan", 3, [17, 16])

        scripture = catalog_client.get_scripture(summary.item_id)
        assert summary.title == "Juan 3:16-17 NVI"
        assert scripture.content.splitlines()[0].startswith("16. Porque")
        assert summary.slide_count == 1

    def test_add_scripture_missing_verse(self, editor, schedule, schedule_client):
        with pytest.raises(NotFoundError):
            editor.add_scripture_from_bible(schedule.id, "NVI", "Juan", 3, [16, 40])

        assert schedule_client.get_entry_count(schedule.id) == 0

    def test_add_scripture_without_bible(self, schedule_client, catalog_client, store, schedule):
        editor = ScheduleEditor(schedule_client, catalog_client, store)

        with pytest.raises(InvalidStateError):
            editor.add_scripture_from_bible(schedule.id, "NVI", "Juan", 3, [16])

    def test_add_image(self, editor, schedule):
        summary = editor.add_image(schedule.id, "http://x/bg.png")

        assert summary.item_type == ItemType.IMAGE
        assert summary.title.startswith("Image #")
        assert summary.content == "http://x/bg.png"
        assert summary.slide_count == 1

    def test_list_entries(self, editor, schedule, amazing_grace):
        editor.add_entry(schedule.id, "song", amazing_grace.id)
        editor.add_image(schedule.id, "http://x/bg.png", "Welcome")

        titles = [e.title for e in editor.list_entries(schedule.id)]

        assert titles == ["Amazing Grace", "Welcome"]

    def test_list_entries_after_removing_reused_scripture(self, editor, schedule):
        first = editor.add_scripture_from_bible(schedule.id, "NVI", "Juan", 3, [16])
        second = editor.add_entry(schedule.id, "scripture", first.item_id)

        editor.remove_entry(schedule.id, first.id)

        entries = editor.list_entries(schedule.id)
        assert [e.id for e in entries] == [second.id]
        assert entries[0].title == "Juan 3:16 NVI"

    def test_list_entries_missing_schedule(self, editor):
        with pytest.raises(NotFoundError):
            editor.list_entries("schedule_missing")

    def test_remove_entry_of_other_schedule(self, editor, schedule_client, schedule, amazing_grace):
        other = schedule_client.create_schedule("Other")
        entry = editor.add_entry(other.id, "song", amazing_grace.id)

        with pytest.raises(NotFoundError):
            editor.remove_entry(schedule.id, entry.id)

        assert schedule_client.get_entry(entry.id) is not None

    def test_reorder(self, editor, schedule, amazing_grace):
        first = editor.add_entry(schedule.id, "song", amazing_grace.id)
        second = editor.add_image(schedule.id, "http://x/bg.png")

        entries = editor.reorder(schedule.id, [second.id, first.id])

        assert [e.id for e in entries] == [second.id, first.id]


class TestPresentation:
    """Verify presentation commands end to end."""

    @pytest.mark.asyncio
    async def test_amazing_grace(self, editor, channel, schedule, amazing_grace):
        """Verify present and navigate payloads for a two slide song."""
        entry = editor.add_entry(schedule.id, "song", amazing_grace.id)
        subscription = channel.subscribe(topic_for(schedule.id))

        await editor.present_entry(schedule.id, entry.id)
        await editor.navigate(schedule.id, 1)

        present = subscription.get_nowait()
        navigate = subscription.get_nowait()
        assert present["action"] == "present"
        assert present["type"] == "song"
        assert present["title"] == "Amazing Grace"
        assert present["verses"] == ["Amazing grace\nhow sweet", "the sound"]
        assert navigate["action"] == "navigate_to"
        assert navigate["verse_index"] == 2

    @pytest.mark.asyncio
    async def test_present_scripture(self, editor, channel, schedule):
        """Verify scriptures are presented with their reference as title."""
        entry = editor.add_scripture_from_bible(schedule.id, "NVI", "Salmos", 23, [1])

        payload = await editor.present_entry(schedule.id, entry.id)

        assert payload["type"] == "scripture"
        assert payload["title"] == "Salmos 23:1 NVI"
        assert payload["verses"] == ["1. El Señor es mi pastor, nada me falta."]

    @pytest.mark.asyncio
    async def test_missing_entry_keeps_state(self, editor, store, schedule, amazing_grace):
        """Verify a failed present leaves the current presentation alone."""
        entry = editor.add_entry(schedule.id, "song", amazing_grace.id)
        await editor.present_entry(schedule.id, entry.id)

        with pytest.raises(NotFoundError):
            await editor.present_entry(schedule.id, "entry_missing")

        state = store.get(schedule.id)
        assert state.active_entry_id == entry.id
        assert state.sequence == 1

    @pytest.mark.asyncio
    async def test_deleted_content_not_presented(self, editor, catalog_client, channel, schedule, amazing_grace):
        """Verify an entry whose song was deleted cannot be presented."""
        entry = editor.add_entry(schedule.id, "song", amazing_grace.id)
        with catalog_client.transaction() as conn:
            conn.execute("DELETE FROM songs WHERE id = ?", (amazing_grace.id,))
        subscription = channel.subscribe(topic_for(schedule.id))

        with pytest.raises(NotFoundError):
            await editor.present_entry(schedule.id, entry.id)

        assert subscription.pending() == 0

    @pytest.mark.asyncio
    async def test_entry_of_other_schedule_not_presented(self, editor, schedule_client, schedule, amazing_grace):
        """Verify entries are only presented in their own schedule."""
        other = schedule_client.create_schedule("Other")
        entry = editor.add_entry(other.id, "song", amazing_grace.id)

        with pytest.raises(NotFoundError):
            await editor.present_entry(schedule.id, entry.id)

    @pytest.mark.asyncio
    async def test_navigate_out_of_range(self, editor, store, schedule, amazing_grace):
        """Verify the editor passes navigation bounds errors through."""
        entry = editor.add_entry(schedule.id, "song", amazing_grace.id)
        await editor.present_entry(schedule.id, entry.id)

        with pytest.raises(InvalidStateError):
            await editor.navigate(schedule.id, 2)

        assert store.get(schedule.id).slide_index == 0

    @pytest.mark.asyncio
    async def test_next_and_previous_slide(self, editor, store, schedule, amazing_grace):
        """Verify relative steps stop at the first and last slide."""
        entry = editor.add_entry(schedule.id, "song", amazing_grace.id)
        await editor.present_entry(schedule.id, entry.id)

        assert await editor.previous_slide(schedule.id) is None
        assert (await editor.next_slide(schedule.id))["verse_index"] == 2
        assert await editor.next_slide(schedule.id) is None
        assert (await editor.previous_slide(schedule.id))["verse_index"] == 1
        assert store.get(schedule.id).slide_index == 0

    @pytest.mark.asyncio
    async def test_commands_on_missing_schedule(self, editor):
        """Verify navigate and black need an existing schedule."""
        with pytest.raises(NotFoundError):
            await editor.navigate("schedule_missing", 0)
        with pytest.raises(NotFoundError):
            await editor.black_screen("schedule_missing")
        with pytest.raises(NotFoundError):
            editor.current_state("schedule_missing")

    @pytest.mark.asyncio
    async def test_current_state(self, editor, schedule, amazing_grace):
        """Verify state snapshots before and after presenting."""
        assert editor.current_state(schedule.id).active_entry_id is None

        entry = editor.add_entry(schedule.id, "song", amazing_grace.id)
        await editor.present_entry(schedule.id, entry.id)
        await editor.black_screen(schedule.id)

        state = editor.current_state(schedule.id).to_dict()
        assert state["active_entry_id"] == entry.id
        assert state["blacked"] is True
        assert state["present"]["title"] == "Amazing Grace"

    @pytest.mark.asyncio
    async def test_delete_schedule_discards_state(self, editor, store, schedule, amazing_grace):
        """Verify deleting a schedule forgets its presentation."""
        entry = editor.add_entry(schedule.id, "song", amazing_grace.id)
        await editor.present_entry(schedule.id, entry.id)

        editor.delete_schedule(schedule.id)

        assert store.get(schedule.id) is None
        with pytest.raises(NotFoundError):
            editor.delete_schedule(schedule.id)
