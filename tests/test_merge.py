import unittest
import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from afterschool.errors import MalformedInputError, MissingSelectionError
from afterschool.models.activity import afterschool
from afterschool.models.snapshot import AppSnapshot
from afterschool.models.student import Student
from afterschool.models.types import Grade, SubClass, Weekday
from afterschool.utils.loaders import CandidateRow
from afterschool.utils.merge import ImportStage, commit_import
from afterschool.utils.state import RosterStore
from afterschool.utils.storage import MemoryStore


def empty_store(students=None, activities=None):
    seed = AppSnapshot(students=list(students or []), activities=list(activities or []), activity_colors={})
    return RosterStore(MemoryStore(), seed=seed)


def jane(**changes):
    fields = dict(row_id="r1", first="Jane", last="Doe", activity="Chess Club", day=Weekday.MONDAY)
    fields.update(changes)
    return CandidateRow(**fields)


class TestCommitImport(unittest.TestCase):

    def test_new_student_with_activity(self):
        store = empty_store()
        summary = commit_import(store, [jane()], Grade.G1, SubClass.A, id_factory=lambda i: f"NEW-{i}")
        self.assertEqual(summary.created, 1)
        self.assertEqual(store.students, [Student(
            "NEW-0", "Jane", "Doe", Grade.G1, SubClass.A, [afterschool("Chess Club", Weekday.MONDAY)],
        )])
        self.assertEqual(store.activities, ["Chess Club"])
        self.assertEqual(summary.activities_added, ["Chess Club"])

    def test_same_row_twice_yields_one_student(self):
        store = empty_store()
        commit_import(store, [jane()], Grade.G1, SubClass.A)
        summary = commit_import(store, [jane(row_id="r2")], Grade.G1, SubClass.A)
        self.assertEqual(len(store.students), 1)
        self.assertEqual(summary.updated, 1)
        self.assertEqual(len(store.students[0].activities), 1)

    def test_duplicates_within_one_batch_merge(self):
        store = empty_store()
        rows = [jane(), jane(row_id="r2", first="JANE", activity="Art", day=None)]
        commit_import(store, rows, Grade.G1, SubClass.A)
        self.assertEqual(len(store.students), 1)
        self.assertEqual([a.name for a in store.students[0].activities], ["Chess Club", "Art"])

    def test_matches_existing_case_insensitively(self):
        existing = Student("S1", "jane", "doe", Grade.G1, SubClass.A, [afterschool("Chess Club")])
        store = empty_store([existing])
        commit_import(store, [jane()], Grade.G1, SubClass.A)
        acts = store.get_student("S1").activities
        # commit matches days exactly: unset day does not cover Monday
        self.assertEqual(acts, [afterschool("Chess Club"), afterschool("Chess Club", Weekday.MONDAY)])

    def test_unset_day_matches_only_unset_day(self):
        existing = Student("S1", "Jane", "Doe", Grade.G1, SubClass.A,
                           [afterschool("Chess Club", Weekday.MONDAY)])
        store = empty_store([existing])
        commit_import(store, [jane(day=None)], Grade.G1, SubClass.A)
        commit_import(store, [jane(day=None)], Grade.G1, SubClass.A)
        acts = store.get_student("S1").activities
        self.assertEqual(acts, [afterschool("Chess Club", Weekday.MONDAY), afterschool("Chess Club")])

    def test_different_class_is_a_different_student(self):
        existing = Student("S1", "Jane", "Doe", Grade.G2, SubClass.A)
        store = empty_store([existing])
        commit_import(store, [jane(activity="")], Grade.G1, SubClass.A)
        self.assertEqual(len(store.students), 2)
        self.assertEqual(store.students[1].activities, [])

    def test_row_values_override_defaults(self):
        store = empty_store()
        commit_import(store, [jane(grade=Grade.G4)], Grade.G1, SubClass.C)
        student = store.students[0]
        self.assertEqual((student.grade, student.sub_class), (Grade.G4, SubClass.C))

    def test_unresolvable_rows_are_skipped_but_activity_is_cataloged(self):
        store = empty_store(activities=["Yoga"])
        rows = [jane(activity="Art"), jane(row_id="r2", first="Ann", grade=Grade.K, sub_class=SubClass.B,
                                           activity="Chess Club")]
        summary = commit_import(store, rows)
        self.assertEqual(summary.skipped, 1)
        self.assertEqual(summary.created, 1)
        self.assertEqual(store.activities, ["Art", "Chess Club", "Yoga"])

    def test_generated_ids_are_unique(self):
        existing = Student("IMP-0", "Old", "One", Grade.G1, SubClass.A)
        store = empty_store([existing])
        commit_import(store, [jane(first="A"), jane(row_id="r2", first="B")], Grade.G1, SubClass.A,
                      id_factory=lambda i: "IMP-0")
        self.assertEqual(len({s.id for s in store.students}), 3)

    def test_empty_stage_is_rejected(self):
        store = empty_store()
        with self.assertRaises(MissingSelectionError):
            commit_import(store, [], Grade.G1, SubClass.A)
        self.assertEqual(store.students, [])


class TestImportStage(unittest.TestCase):

    def test_preview_requires_grade_and_sub_class(self):
        stage = ImportStage()
        with self.assertRaises(MissingSelectionError):
            stage.preview_class("Ava Nguyen", None, SubClass.A)
        with self.assertRaises(MissingSelectionError):
            stage.preview_class("Ava Nguyen", Grade.K, None)
        with self.assertRaises(MalformedInputError):
            stage.preview_class("  ", Grade.K, SubClass.A)
        self.assertEqual(stage.rows, [])

    def test_preview_edit_and_commit(self):
        store = empty_store()
        stage = ImportStage()
        rows = stage.preview_class("Ava Nguyen\nBen Ortiz\nChloe Singh", Grade.K, SubClass.A)
        stage.update_row(rows[0].row_id, activity="Soccer", day="wednesday")
        stage.delete_row(rows[2].row_id)
        summary = stage.commit(store)
        self.assertEqual(summary.created, 2)
        self.assertEqual(summary.processed, 2)
        self.assertEqual(stage.rows, [])
        ava = store.students[0]
        self.assertEqual(ava.activities, [afterschool("Soccer", Weekday.WEDNESDAY)])
        self.assertEqual(store.catalog, ["Soccer"])

    def test_bad_csv_keeps_current_stage(self):
        stage = ImportStage()
        stage.load_csv("Doe,John,1,A")
        with self.assertRaises(MalformedInputError):
            stage.load_csv("")
        self.assertEqual(len(stage.rows), 1)

    def test_update_unknown_row(self):
        self.assertIsNone(ImportStage().update_row("missing", activity="Art"))

    def test_csv_rows_fall_back_to_defaults(self):
        store = empty_store()
        stage = ImportStage()
        stage.load_csv("Last Name,First Name,Grade,Subclass\nDoe,John,,\nRoe,Rae,3,B")
        stage.set_defaults(Grade.G2, SubClass.D)
        stage.commit(store)
        self.assertEqual([s.class_label for s in store.students], ["2/D", "3/B"])


if __name__ == '__main__':
    unittest.main()
