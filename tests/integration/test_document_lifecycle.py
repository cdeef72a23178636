"""
End-to-end document lifecycle tests.

Drives a WorkflowEntity the way a host editor would: edit, save, undo,
then move the document through moderation with several observers attached.
"""

import pytest

from docspine import DocumentState, WorkflowEntity
from docspine.core.errors import EmptyHistoryError, TransitionRejectedError
from docspine.core.logging import configure_logging


class TestUndoScenario:
    def test_save_edit_undo_sequence(self):
        doc = WorkflowEntity("doc-1", "a")
        assert doc.state == DocumentState.DRAFT

        doc.save()
        assert len(doc.history) == 1
        assert doc.content == "a"

        doc.set_content("b")
        doc.save()
        assert len(doc.history) == 2

        doc.set_content("c")

        doc.restore(doc.history.pop().unwrap())
        assert doc.content == "b"
        assert len(doc.history) == 1

        doc.restore(doc.history.pop().unwrap())
        assert doc.content == "a"
        assert len(doc.history) == 0

        empty = doc.history.pop()
        assert empty.is_err()
        assert isinstance(empty.unwrap_err(), EmptyHistoryError)
        assert doc.content == "a"

    def test_undo_shortcut_walks_back(self):
        doc = WorkflowEntity("doc-1", "v1")
        for version in ("v2", "v3", "v4"):
            doc.save()
            doc.set_content(version)

        restored = []
        while doc.undo().is_ok():
            restored.append(doc.content)

        assert restored == ["v3", "v2", "v1"]
        assert doc.content == "v1"

    def test_bounded_history_forgets_oldest(self):
        doc = WorkflowEntity("doc-1", "a", max_history=2)
        for version in ("b", "c", "d"):
            doc.save()
            doc.set_content(version)

        assert [s.content for s in doc.history.snapshots] == ["b", "c"]
        doc.undo()
        doc.undo()
        assert doc.content == "b"
        assert doc.undo().is_err()


class TestLifecycleScenario:
    def test_draft_to_published(self, observed_entity, recorder):
        doc = observed_entity
        assert doc.state == DocumentState.DRAFT

        assert doc.publish().unwrap().effect == "moved to moderation"
        assert doc.state == DocumentState.MODERATION

        assert doc.approve().unwrap().effect == "approved and published"
        assert doc.state == DocumentState.PUBLISHED

        assert doc.publish().unwrap().effect == "already published"
        assert doc.state == DocumentState.PUBLISHED

        assert recorder.effects == [
            "moved to moderation",
            "approved and published",
            "already published",
        ]
        assert [e.new_state for e in recorder.events] == [
            DocumentState.MODERATION,
            DocumentState.PUBLISHED,
            DocumentState.PUBLISHED,
        ]

    def test_rejected_approve_then_recovery(self, observed_entity, recorder):
        doc = observed_entity

        with pytest.raises(TransitionRejectedError, match="cannot approve a draft"):
            doc.approve().unwrap()
        assert recorder.events == []

        doc.publish()
        doc.publish()
        doc.approve()

        assert recorder.effects == [
            "moved to moderation",
            "already in moderation, needs approval",
            "approved and published",
        ]

    def test_observers_notified_in_registration_order(self, make_recorder, call_log):
        doc = WorkflowEntity("doc-1")
        editor = make_recorder("editor")
        auditor = make_recorder("auditor")
        doc.register(editor)
        doc.register(auditor)

        doc.publish()
        doc.unregister(editor)
        doc.approve()

        assert call_log == [
            ("editor", "moved to moderation"),
            ("auditor", "moved to moderation"),
            ("auditor", "approved and published"),
        ]

    def test_failing_observer_does_not_block_others(self, exploding, make_recorder, call_log):
        doc = WorkflowEntity("doc-1")
        doc.register(exploding)
        auditor = make_recorder("auditor")
        doc.register(auditor)

        doc.publish()
        doc.approve()

        assert exploding.attempts == 2
        assert call_log == [
            ("auditor", "moved to moderation"),
            ("auditor", "approved and published"),
        ]
        assert doc.state == DocumentState.PUBLISHED

    def test_editing_is_independent_of_lifecycle(self, observed_entity, recorder):
        doc = observed_entity
        doc.set_content("first draft")
        doc.save()
        doc.publish()
        doc.set_content("reviewer edits")
        doc.approve()

        doc.undo()

        assert doc.content == "first draft"
        assert doc.state == DocumentState.PUBLISHED
        assert len(recorder.events) == 2


class TestLoggedLifecycle:
    def test_json_logs_for_full_run(self, capsys):
        configure_logging(level="INFO", json_format=True, service="editor")
        doc = WorkflowEntity("doc-1")

        doc.approve()
        doc.publish()

        out = capsys.readouterr().out
        assert '"event": "transition_rejected"' in out
        assert '"event": "transition_applied"' in out
        assert '"entity_id": "doc-1"' in out
        assert '"service.name": "editor"' in out
