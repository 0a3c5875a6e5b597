import unittest

from timetable_ga.config import GAConfig
from timetable_ga.encoding import decode, to_flat, from_flat, chromosome_to_string
from timetable_ga.errors import (
    CatalogError,
    ChromosomeError,
    UnknownAssignmentError,
    UnknownTimeslotError,
)
from timetable_ga.evaluation import count_clashes, evaluate, fitness_from_clashes
from timetable_ga.model import CatalogBuilder, Individual, Population


def small_catalog():
    # 2 días x 3 periodos; los timeslots 0 y 3 abren el día
    b = CatalogBuilder(periods_per_day=3)
    for t in range(6):
        b.add_timeslot(t, f"Slot {t}")
    b.add_assignment(1, 1, "Ana", 1, "语文")
    b.add_assignment(2, 2, "Luis", 1, "数学")
    b.add_assignment(3, 1, "Ana", 2, "语文")
    b.add_assignment(4, 3, "Eva", 2, "英语")
    return b.build()


def two_slot_catalog():
    # Un día con 2 periodos; mismo docente y mismo grupo
    b = CatalogBuilder(periods_per_day=2)
    b.add_timeslot(0, "Primera")
    b.add_timeslot(1, "Segunda")
    b.add_assignment(10, 7, "Rosa", 1, "语文")
    b.add_assignment(11, 7, "Rosa", 1, "数学")
    return b.build()


VALID = [(1, 0), (2, 1), (3, 3), (4, 0)]


class CatalogTests(unittest.TestCase):
    def test_day_and_period_derived_from_id(self):
        b = CatalogBuilder(periods_per_day=6)
        for t in range(12):
            b.add_timeslot(t, f"S{t}")
        b.add_assignment(1, 1, "X", 1, "语文")
        cat = b.build()
        self.assertEqual(cat.timeslot(6).day, 1)
        self.assertTrue(cat.timeslot(6).opens_day)
        self.assertTrue(cat.timeslot(0).opens_day)
        self.assertFalse(cat.timeslot(5).opens_day)
        self.assertEqual(cat.num_days, 2)

    def test_gene_order_follows_insertion(self):
        cat = small_catalog()
        self.assertEqual(cat.assignment_ids, [1, 2, 3, 4])
        self.assertEqual(cat.class_group_ids, [1, 2])

    def test_duplicates_and_gaps_rejected(self):
        b = CatalogBuilder()
        b.add_timeslot(0, "A")
        with self.assertRaises(CatalogError):
            b.add_timeslot(0, "B")
        b.add_assignment(1, 1, "X", 1, "语文")
        with self.assertRaises(CatalogError):
            b.add_assignment(1, 2, "Y", 1, "数学")
        b.add_timeslot(2, "C")
        with self.assertRaises(CatalogError):
            b.build()

    def test_empty_catalog_rejected(self):
        b = CatalogBuilder()
        b.add_timeslot(0, "A")
        with self.assertRaises(CatalogError):
            b.build()

    def test_population_fittest_puts_unset_last(self):
        a = Individual([(1, 0)], fitness=0.5)
        b = Individual([(1, 1)])
        c = Individual([(1, 2)], fitness=1.0)
        pop = Population([a, b, c])
        self.assertIs(pop.fittest(), c)
        self.assertIs(pop.fittest(1), a)
        self.assertIs(pop.fittest(2), b)
        self.assertAlmostEqual(pop.average_fitness(), 0.75)


class EncodingTests(unittest.TestCase):
    def test_decode_one_class_per_assignment(self):
        cat = small_catalog()
        classes = decode(VALID, cat)
        self.assertEqual(len(classes), cat.num_assignments)
        self.assertEqual([c.assignment_id for c in classes], cat.assignment_ids)
        self.assertEqual([c.slot_index for c in classes], [0, 1, 2, 3])
        self.assertEqual([c.class_group_id for c in classes], [1, 1, 2, 2])
        for c in classes:
            self.assertIn(c.timeslot_id, cat.timeslot_ids)

    def test_decode_unknown_ids(self):
        cat = small_catalog()
        with self.assertRaises(UnknownAssignmentError) as ctx:
            decode([(1, 0), (99, 1)], cat)
        self.assertEqual(ctx.exception.position, 1)
        self.assertIsInstance(ctx.exception, KeyError)
        with self.assertRaises(UnknownTimeslotError):
            decode([(1, 42)], cat)

    def test_flat_chromosome(self):
        cat = small_catalog()
        flat = to_flat(VALID)
        self.assertEqual(flat, [1, 0, 2, 1, 3, 3, 4, 0])
        self.assertEqual(from_flat(flat, cat), VALID)
        self.assertEqual(chromosome_to_string(VALID[:2]), "1:0 2:1")
        with self.assertRaises(ChromosomeError):
            from_flat(flat[:-1], cat)
        with self.assertRaises(ChromosomeError):
            from_flat([2, 1, 1, 0, 3, 3, 4, 0], cat)


class EvaluationTests(unittest.TestCase):
    def test_valid_schedule_has_no_clashes(self):
        cat = small_catalog()
        res = count_clashes(decode(VALID, cat), cat)
        self.assertEqual(res.clashes, 0)
        self.assertEqual(res.violations, [])

    def test_teacher_double_booking_across_groups(self):
        cat = small_catalog()
        # Ana (docente 1) en el timeslot 0 con ambos grupos; el grupo 2 choca con Eva
        genes = [(1, 0), (2, 1), (3, 0), (4, 0)]
        res = count_clashes(decode(genes, cat), cat)
        self.assertEqual(res.teacher, 2)
        self.assertEqual(res.teacher_class, 0)
        self.assertEqual(res.class_group, 2)
        self.assertEqual(res.clashes, 4)
        self.assertGreater(res.clashes, count_clashes(decode(VALID, cat), cat).clashes)

    def test_same_teacher_same_group_same_slot(self):
        cat = two_slot_catalog()
        res = count_clashes(decode([(10, 0), (11, 0)], cat), cat)
        self.assertEqual(res.teacher, 2)
        self.assertEqual(res.teacher_class, 2)
        self.assertEqual(res.class_group, 2)
        self.assertEqual(res.first_period, 1)   # 数学 en la primera hora
        self.assertEqual(res.clashes, 7)
        self.assertGreaterEqual(res.clashes, 3)

        ok = count_clashes(decode([(10, 0), (11, 1)], cat), cat)
        self.assertEqual(ok.clashes, 0)

    def test_teacher_class_weight_is_configurable(self):
        cat = two_slot_catalog()
        cfg = GAConfig(teacher_class_clash_weight=0)
        res = count_clashes(decode([(10, 0), (11, 0)], cat), cat, cfg)
        self.assertEqual(res.teacher_class, 0)
        self.assertEqual(res.clashes, 5)

    def test_first_period_allow_list(self):
        cat = small_catalog()
        genes = [(1, 1), (2, 0), (3, 3), (4, 4)]
        res = count_clashes(decode(genes, cat), cat)
        self.assertEqual(res.first_period, 1)
        self.assertEqual(res.clashes, 1)

        open_cfg = GAConfig(first_period_subjects=[])
        self.assertEqual(count_clashes(decode(genes, cat), cat, open_cfg).clashes, 0)

    def test_daily_subject_repeat(self):
        b = CatalogBuilder(periods_per_day=3)
        for t in range(6):
            b.add_timeslot(t, f"Slot {t}")
        b.add_assignment(1, 1, "Ana", 1, "语文")
        b.add_assignment(2, 2, "Luis", 1, "语文")
        cat = b.build()

        same_day = count_clashes(decode([(1, 0), (2, 1)], cat), cat)
        self.assertEqual(same_day.daily_repeat, 1)
        self.assertEqual(same_day.clashes, 1)

        other_day = count_clashes(decode([(1, 0), (2, 3)], cat), cat)
        self.assertEqual(other_day.clashes, 0)

    def test_fitness_from_clashes(self):
        self.assertEqual(fitness_from_clashes(0), 1.0)
        previous = 1.0
        for c in range(1, 50):
            f = fitness_from_clashes(c)
            self.assertGreater(f, 0.0)
            self.assertLess(f, previous)
            self.assertLess(f, 1.0)
            previous = f

    def test_evaluate_caches_on_individual(self):
        cat = two_slot_catalog()
        ind = Individual([(10, 0), (11, 0)])
        res = evaluate(ind, cat)
        self.assertEqual(ind.clashes, 7)
        self.assertEqual(ind.fitness, 1.0 / 8.0)
        self.assertEqual(res.fitness, ind.fitness)
        self.assertEqual(res.as_dict()["choques"], 7)


if __name__ == "__main__":
    unittest.main()
