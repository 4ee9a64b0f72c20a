from __future__ import annotations

import json
import os
import tempfile
from unittest import TestCase

from .config import DEFAULT_FACTS_PATH
from .facts import load_facts
from .models import Fact, Topic
from .pack import FLAG_PLACEHOLDER, build_pack, build_question, code_to_flag, make_options
from .rng import Mulberry32

FACTS = load_facts(DEFAULT_FACTS_PATH)


def _fact(name: str, code: str = "XX", government: str = "Republic") -> Fact:
    return Fact(
        name=name,
        code=code,
        capital=f"{name} City",
        language=f"{name}ish",
        demonym=f"{name}ian",
        government=government,
        economy=f"{name} exports",
    )


def _pack_json(pack) -> str:
    return json.dumps([q.wire() for q in pack], ensure_ascii=False, sort_keys=False)


class BuildPackTests(TestCase):
    def test_seed_42_five_questions_is_stable(self):
        first = build_pack(FACTS, seed=42, num_questions=5, allow_flags=True)
        for _ in range(3):
            again = build_pack(FACTS, seed=42, num_questions=5, allow_flags=True)
            self.assertEqual(again, first)
            self.assertEqual(_pack_json(again), _pack_json(first))
        self.assertEqual(len(first), 5)

    def test_determinism_across_parameters(self):
        for seed in (0, 1, 99, 2**31, 0xFFFFFFFF):
            for n in (1, 7, 20, 45):
                for flags in (True, False):
                    self.assertEqual(
                        _pack_json(build_pack(FACTS, seed, n, flags)),
                        _pack_json(build_pack(FACTS, seed, n, flags)),
                    )

    def test_different_seeds_give_different_packs(self):
        self.assertNotEqual(build_pack(FACTS, 1, 10), build_pack(FACTS, 2, 10))

    def test_every_question_is_valid(self):
        for seed in range(40):
            for q in build_pack(FACTS, seed, 20):
                self.assertIn(q.answer, q.options)
                self.assertEqual(len(q.options), len(set(q.options)))
                self.assertEqual(len(q.options), 4)

    def test_no_flags_when_disabled(self):
        for seed in range(40):
            topics = {q.topic for q in build_pack(FACTS, seed, 20, allow_flags=False)}
            self.assertNotIn(Topic.FLAG, topics)

    def test_flag_questions_answer_with_country_name(self):
        names = {f.name for f in FACTS}
        flag_questions = [
            q for seed in range(30) for q in build_pack(FACTS, seed, 20) if q.topic is Topic.FLAG
        ]
        self.assertTrue(flag_questions)
        for q in flag_questions:
            self.assertIn(q.answer, names)
            self.assertIsNotNone(q.flag_glyph)
            self.assertEqual(q.prompt, "Which country does this flag belong to?")

    def test_glyph_only_on_flag_questions(self):
        for q in build_pack(FACTS, 5, 30):
            if q.topic is Topic.FLAG:
                self.assertIn("flagGlyph", q.wire())
            else:
                self.assertIsNone(q.flag_glyph)
                self.assertNotIn("flagGlyph", q.wire())

    def test_countries_do_not_repeat_until_table_exhausted(self):
        facts = [_fact(n) for n in ("Alpha", "Bravo", "Charlie")]

        def subject(q):
            if q.topic is Topic.FLAG:
                return q.answer
            return next(f.name for f in facts if f.name in q.prompt)

        pack = build_pack(facts, 17, 7)
        subjects = [subject(q) for q in pack]
        self.assertEqual(len(set(subjects[:3])), 3)
        for i in range(3, 7):
            self.assertEqual(subjects[i], subjects[i % 3])

    def test_small_pool_yields_fewer_options(self):
        facts = [_fact("Alpha", government="Republic"), _fact("Bravo", government="Monarchy"), _fact("Charlie", government="Republic")]
        pool = [f.government for f in facts]
        q = build_question(facts[0], Topic.GOVERNMENT, pool, Mulberry32(1))
        self.assertEqual(sorted(q.options), ["Monarchy", "Republic"])
        self.assertEqual(q.answer, "Republic")

    def test_single_fact_table_terminates(self):
        pack = build_pack([_fact("Solo", code="SO")], 3, 4)
        self.assertEqual(len(pack), 4)
        for q in pack:
            self.assertEqual(len(q.options), 1)
            self.assertEqual(q.options[0], q.answer)

    def test_rejects_empty_table_and_zero_questions(self):
        with self.assertRaises(ValueError):
            build_pack([], 1, 5)
        with self.assertRaises(ValueError):
            build_pack(FACTS, 1, 0)

    def test_prompts_name_the_country(self):
        fact = _fact("Alpha")
        rng = Mulberry32(2)
        self.assertEqual(build_question(fact, Topic.CAPITAL, ["Alpha City"], rng).prompt, "What is the capital of Alpha?")
        self.assertEqual(build_question(fact, Topic.ECONOMY, ["Alpha exports"], rng).prompt, "A key part of Alpha's economy is...")
        self.assertEqual(build_question(fact, Topic.DEMONYM, ["Alphaian"], rng).prompt, "A person from Alpha is...")


class MakeOptionsTests(TestCase):
    def test_correct_value_always_present(self):
        rng = Mulberry32(8)
        for _ in range(20):
            options = make_options("B", ["A", "B", "C", "D", "E", "F"], 4, rng)
            self.assertIn("B", options)
            self.assertEqual(len(set(options)), 4)

    def test_exhausted_pool(self):
        self.assertEqual(sorted(make_options("A", ["A", "B", "A"], 4, Mulberry32(1))), ["A", "B"])


class CodeToFlagTests(TestCase):
    def test_regional_indicators(self):
        self.assertEqual(code_to_flag("FR"), "\U0001F1EB\U0001F1F7")
        self.assertEqual(code_to_flag("jp"), "\U0001F1EF\U0001F1F5")

    def test_malformed_codes_fall_back(self):
        for code in (None, "", "F", "FRA", "F1", "--"):
            self.assertEqual(code_to_flag(code), FLAG_PLACEHOLDER)


class LoadFactsTests(TestCase):
    def test_bundled_table(self):
        self.assertGreaterEqual(len(FACTS), 4)
        self.assertEqual(len({f.name for f in FACTS}), len(FACTS))

    def test_empty_table_rejected(self):
        with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False) as fh:
            fh.write("[]")
        try:
            with self.assertRaises(ValueError):
                load_facts(fh.name)
        finally:
            os.unlink(fh.name)
