import unittest
import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from afterschool.errors import MalformedInputError
from afterschool.models.types import Grade, SubClass
from afterschool.utils.loaders import (
    activities_template_csv,
    detect_columns,
    import_template_csv,
    parse_csv,
    parse_free_text,
    parse_name,
    split_name_tokens,
)


class TestFreeText(unittest.TestCase):

    def test_parse_name_forms(self):
        self.assertEqual(parse_name("Doe, Jane"), ("Jane", "Doe"))
        self.assertEqual(parse_name("Ava Nguyen"), ("Ava", "Nguyen"))
        self.assertEqual(parse_name("Prince"), ("Prince", ""))
        self.assertEqual(parse_name("  Mary   Ann  Lee "), ("Mary Ann", "Lee"))
        self.assertIsNone(parse_name("   "))

    def test_comma_without_both_parts_falls_back_to_words(self):
        self.assertEqual(parse_name("Doe,"), ("Doe,", ""))

    def test_split_tokens(self):
        text = "Ava Nguyen\r\nBen Ortiz; Chloe Singh\tDan Wu,, \n"
        self.assertEqual(split_name_tokens(text), ["Ava Nguyen", "Ben Ortiz", "Chloe Singh", "Dan Wu"])

    def test_rows_have_no_grade(self):
        rows = parse_free_text("Ava Nguyen\nPrince")
        self.assertEqual([(r.first, r.last) for r in rows], [("Ava", "Nguyen"), ("Prince", "")])
        self.assertTrue(all(r.grade is None and r.sub_class is None for r in rows))
        self.assertTrue(rows[0].row_id.startswith("TMP-"))
        self.assertNotEqual(rows[0].row_id, rows[1].row_id)

    def test_blank_text_is_rejected(self):
        with self.assertRaises(MalformedInputError):
            parse_free_text("   ")
        with self.assertRaises(MalformedInputError):
            parse_free_text(",;\n\t")


class TestCsv(unittest.TestCase):

    def test_header_detection(self):
        self.assertEqual(detect_columns("Last Name,First Name,Grade,Subclass"),
                         {"last": 0, "first": 1, "grade": 2, "sub": 3})
        self.assertEqual(detect_columns("first,class,surname_last"),
                         {"last": 2, "first": 0, "grade": 1, "sub": -1})
        self.assertIsNone(detect_columns("Doe,John,1,A"))

    def test_with_header(self):
        text = "Last Name,First Name,Grade,Subclass\nDoe,John,1,a\n\"Lee\",\"Ann\",k,B\n"
        rows = parse_csv(text)
        self.assertEqual([(r.first, r.last, r.grade, r.sub_class) for r in rows], [
            ("John", "Doe", Grade.G1, SubClass.A),
            ("Ann", "Lee", Grade.K, SubClass.B),
        ])
        self.assertTrue(rows[0].row_id.startswith("CSV-"))

    def test_reordered_header(self):
        rows = parse_csv("Subclass,Grade,First Name,Last Name\nC,3,Ann,Lee")
        self.assertEqual((rows[0].first, rows[0].last, rows[0].grade, rows[0].sub_class),
                         ("Ann", "Lee", Grade.G3, SubClass.C))

    def test_without_header_uses_fixed_positions(self):
        rows = parse_csv("Doe,John,2,D\nSmith,Amy")
        self.assertEqual(len(rows), 2)
        self.assertEqual((rows[0].last, rows[0].first, rows[0].grade), ("Doe", "John", Grade.G2))
        self.assertIsNone(rows[1].grade)
        self.assertIsNone(rows[1].sub_class)

    def test_invalid_tokens_become_absent(self):
        rows = parse_csv("last,first,grade,sub\nDoe,John,7,E\nRoe,Rae,K,Z")
        self.assertIsNone(rows[0].grade)
        self.assertIsNone(rows[0].sub_class)
        self.assertEqual(rows[1].grade, Grade.K)
        self.assertIsNone(rows[1].sub_class)

    def test_nameless_rows_are_dropped(self):
        rows = parse_csv("last,first,grade,sub\n,,1,A\nDoe,,1,A")
        self.assertEqual([(r.first, r.last) for r in rows], [("", "Doe")])

    def test_empty_csv(self):
        with self.assertRaises(MalformedInputError) as ctx:
            parse_csv("\n  \r\n")
        self.assertEqual(str(ctx.exception), "Empty CSV")

    def test_no_valid_rows(self):
        with self.assertRaises(MalformedInputError) as ctx:
            parse_csv("Last Name,First Name,Grade,Subclass\n,,1,A")
        self.assertEqual(str(ctx.exception), "No valid rows found in CSV")


class TestTemplates(unittest.TestCase):

    def test_import_template(self):
        lines = import_template_csv().splitlines()
        self.assertEqual(lines, ["Last Name,First Name,Grade,Subclass", "Doe,John,1,A"])

    def test_import_template_round_trips_through_parser(self):
        rows = parse_csv(import_template_csv())
        self.assertEqual((rows[0].first, rows[0].last, rows[0].grade), ("John", "Doe", Grade.G1))

    def test_activities_template(self):
        lines = activities_template_csv().splitlines()
        self.assertEqual(lines[0], "Activity Name,When,Day,Color")
        self.assertGreaterEqual(len(lines), 2)


if __name__ == '__main__':
    unittest.main()
