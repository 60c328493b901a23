import dataclasses
import tempfile
import unittest
from pathlib import Path

from brainbites.quiz.bank import QuestionBank, build_bank, load_bank, locate_source, read_question_rows
from brainbites.quiz.errors import ParseFailure, SourceUnavailable
from brainbites.quiz.schema import CANONICAL_CATEGORIES, Question

HEADER = "id,category,question,optionA,optionB,optionC,optionD,correctAnswer,explanation\n"


class QuestionBankLoadTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, name: str, body: str) -> Path:
        p = self.root / name
        p.write_text(body, encoding="utf-8")
        return p

    def test_rows_are_read_as_strings_keyed_by_header(self) -> None:
        path = self._write(
            "q.csv",
            HEADER + 'F1,funfacts,"Why, though?",1,2,3,4,b,"Because, reasons."\n',
        )
        rows = read_question_rows(path)
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["question"], "Why, though?")
        self.assertEqual(rows[0]["optionA"], "1")
        q = Question.from_row(rows[0])
        self.assertEqual(q.correct_answer, "B")

    def test_rows_without_id_or_question_are_dropped(self) -> None:
        path = self._write(
            "q.csv",
            HEADER
            + "F1,funfacts,Q1,a,b,c,d,A,e\n"
            + ",funfacts,No id,a,b,c,d,A,e\n"
            + "F3,funfacts,,a,b,c,d,A,e\n"
            + "P1,psychology,Q2,a,b,c,d,B,e\n",
        )
        bank = build_bank(read_question_rows(path))
        self.assertEqual([q.id for q in bank], ["F1", "P1"])
        self.assertEqual(bank.category_counts, {"funfacts": 1, "psychology": 1})

    def test_counts_and_categories_follow_bank(self) -> None:
        bank = QuestionBank(
            [
                Question(id="S1", category="science", question="q"),
                Question(id="F1", category="funfacts", question="q"),
                Question(id="S2", category="science", question="q"),
                Question(id="X1", category="", question="q"),
            ]
        )
        self.assertEqual(bank.count_of("science"), 2)
        self.assertEqual(bank.count_of("history"), 0)
        self.assertEqual(bank.list_categories(), ["science", "funfacts"])
        self.assertEqual([q.id for q in bank.pool("science")], ["S1", "S2"])
        self.assertEqual(len(bank), 4)

    def test_empty_bank_lists_canonical_categories(self) -> None:
        self.assertEqual(QuestionBank([]).list_categories(), CANONICAL_CATEGORIES)

    def test_duplicate_ids_keep_first(self) -> None:
        bank = build_bank(
            [
                {"id": "F1", "category": "funfacts", "question": "first"},
                {"id": "F1", "category": "funfacts", "question": "second"},
            ]
        )
        self.assertEqual(len(bank), 1)
        self.assertEqual(bank.get("F1").question, "first")

    def test_missing_file_uses_fallback_bank(self) -> None:
        result = load_bank(self.root / "missing.csv")
        self.assertTrue(result.used_fallback)
        self.assertIsInstance(result.error, SourceUnavailable)
        self.assertTrue(result.bank.is_fallback)
        self.assertEqual([q.id for q in result.bank], ["A1", "B1"])
        self.assertEqual(result.bank.category_counts, {"funfacts": 1, "psychology": 1})

    def test_no_valid_rows_uses_fallback_bank(self) -> None:
        path = self._write("q.csv", HEADER + ",funfacts,,a,b,c,d,A,e\n,math,Q,a,b,c,d,A,e\n")
        result = load_bank(path)
        self.assertTrue(result.used_fallback)
        self.assertIsInstance(result.error, ParseFailure)
        categories = result.bank.list_categories()
        self.assertIn("funfacts", categories)
        self.assertIn("psychology", categories)

    def test_empty_file_uses_fallback_bank(self) -> None:
        path = self._write("q.csv", "")
        result = load_bank(path)
        self.assertTrue(result.used_fallback)
        self.assertIsInstance(result.error, ParseFailure)

    def test_ragged_row_keeps_bank(self) -> None:
        body = "".join(f"F{i},funfacts,Q{i},a,b,c,d,A,e\n" for i in range(1, 20))
        path = self._write("q.csv", HEADER + body + "F20,funfacts,Q20,a,b,c,d,A,unquoted, comma\n")
        result = load_bank(path)
        self.assertFalse(result.used_fallback)
        self.assertEqual(len(result.bank), 20)
        self.assertEqual(result.bank.get("F20").explanation, "unquoted")

    def test_short_row_gets_empty_cells(self) -> None:
        path = self._write("q.csv", HEADER + "F1,funfacts,Q1,a,b\n")
        q = load_bank(path).bank.get("F1")
        self.assertEqual(q.option_b, "b")
        self.assertEqual(q.option_c, "")
        self.assertEqual(q.explanation, "")

    def test_no_path_uses_fallback_bank(self) -> None:
        self.assertTrue(load_bank(None).used_fallback)

    def test_valid_file_loads(self) -> None:
        path = self._write("q.csv", HEADER + "F1,funfacts,Q1,a,b,c,d,A,e\nF2,funfacts,Q2,a,b,c,d,C,e\n")
        result = load_bank(path)
        self.assertFalse(result.used_fallback)
        self.assertIsNone(result.error)
        self.assertEqual(result.bank.count_of("funfacts"), 2)

    def test_bundled_copy_is_made_when_destination_missing(self) -> None:
        bundled = self._write("bundled.csv", HEADER + "F1,funfacts,Q1,a,b,c,d,A,e\n")
        dest = self.root / "docs" / "questions.csv"
        self.assertEqual(locate_source(dest, bundled), dest)
        self.assertTrue(dest.is_file())
        result = load_bank(dest, bundled)
        self.assertFalse(result.used_fallback)

    def test_existing_destination_is_not_overwritten(self) -> None:
        bundled = self._write("bundled.csv", HEADER + "F1,funfacts,Bundled,a,b,c,d,A,e\n")
        dest = self._write("questions.csv", HEADER + "F1,funfacts,Local,a,b,c,d,A,e\n")
        locate_source(dest, bundled)
        self.assertIn("Local", dest.read_text(encoding="utf-8"))

    def test_missing_bundle_raises(self) -> None:
        with self.assertRaises(SourceUnavailable):
            locate_source(self.root / "questions.csv", self.root / "nope.csv")
        with self.assertRaises(SourceUnavailable):
            locate_source(self.root / "questions.csv")


class QuestionRecordTests(unittest.TestCase):
    def test_question_is_immutable(self) -> None:
        q = Question(id="F1", category="funfacts", question="q")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            q.id = "F2"  # type: ignore[misc]

    def test_payload_shape(self) -> None:
        q = Question.from_row(
            {
                "id": "F1",
                "category": "funfacts",
                "question": "Which?",
                "optionA": "a",
                "optionB": "b",
                "optionC": "c",
                "optionD": "d",
                "correctAnswer": "D",
                "explanation": "because",
            }
        )
        self.assertEqual(
            q.to_payload(),
            {
                "id": "F1",
                "question": "Which?",
                "options": {"A": "a", "B": "b", "C": "c", "D": "d"},
                "correctAnswer": "D",
                "explanation": "because",
            },
        )

    def test_missing_fields_become_empty_strings(self) -> None:
        q = Question.from_row({"id": "F1", "question": "q", "optionA": None})
        self.assertEqual(q.category, "")
        self.assertEqual(q.option_a, "")
        self.assertEqual(q.explanation, "")


if __name__ == "__main__":
    unittest.main()
