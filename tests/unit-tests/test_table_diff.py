import sys, os, unittest
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from tablediff.algorithms.changes import (
    ChangeType, DiffResult, make_insert, make_delete, make_update, make_move
)
from tablediff.algorithms.table_diff import (
    TableDiff, Identifiable, DiffSearchError,
    diff, changes_from, edit_distance, apply_changes
)
from helpers.naive_diff import Item, items, same_key, same_value


def by_key(old, new):
    return diff(old, new, same_key, same_value)


class TestConcreteScenarios(unittest.TestCase):
    def test_both_empty(self):
        self.assertEqual(by_key([], []), [])

    def test_insert_into_empty(self):
        self.assertEqual(by_key([], items('x')), [make_insert(0)])

    def test_delete_to_empty(self):
        self.assertEqual(by_key(items('x'), []), [make_delete(0)])

    def test_delete_middle(self):
        self.assertEqual(by_key(items('abc'), items('ac')), [make_delete(1)])

    def test_insert_middle(self):
        self.assertEqual(by_key(items('ac'), items('abc')), [make_insert(1)])

    def test_reorder_is_delete_and_insert(self):
        changes = by_key(items('ab'), items('ba'))
        self.assertEqual(changes, [make_delete(0), make_insert(1)])
        self.assertNotIn(ChangeType.UPDATE, [c.kind for c in changes])

    def test_update_detected(self):
        self.assertEqual(by_key([Item('a', 1)], [Item('a', 2)]), [make_update(0)])

    def test_update_then_delete(self):
        old = [Item('a', 1), Item('b'), Item('c')]
        new = [Item('a', 2), Item('c')]
        self.assertEqual(by_key(old, new), [make_update(0), make_delete(1)])

    def test_disjoint_deletes_then_inserts(self):
        self.assertEqual(by_key(items('x'), items('y')), [make_delete(0), make_insert(0)])
        self.assertEqual(by_key(items('ab'), items('cd')),
                         [make_delete(0), make_delete(1), make_insert(0), make_insert(1)])

    def test_equal_reach_takes_deletion_branch(self):
        self.assertEqual(by_key(items('ab'), items('cad')),
                         [make_insert(0), make_delete(1), make_insert(2)])

    def test_identical(self):
        self.assertEqual(by_key(items('abcdef'), items('abcdef')), [])


class TestEntryPoints(unittest.TestCase):
    def test_diff_uses_identifiable_and_eq(self):
        self.assertEqual(diff([Item('a', 1), Item('b')], [Item('a', 2), Item('b')]), [make_update(0)])
        self.assertEqual(diff(items('abc'), items('abc')), [])

    def test_changes_from_updates_every_kept_row(self):
        changes = changes_from(items('abc'), items('abc'), same_key)
        self.assertEqual(changes, [make_update(0), make_update(1), make_update(2)])
        changes = changes_from(items('abc'), items('ac'), same_key)
        self.assertEqual(changes, [make_update(0), make_delete(1), make_update(2)])

    def test_plain_values(self):
        same = lambda a, b: a == b
        self.assertEqual(diff([1, 2, 3], [1, 3], same, same), [make_delete(1)])
        self.assertEqual(diff(['a'], ['a', 'b'], same), [make_insert(1)])

    def test_case_insensitive_identity(self):
        changes = diff(['Apple', 'pear'], ['apple', 'pear'],
                       lambda a, b: a.lower() == b.lower())
        self.assertEqual(changes, [make_update(0)])

    def test_inputs_not_mutated(self):
        old, new = items('abc'), items('cab')
        old_copy, new_copy = list(old), list(new)
        by_key(old, new)
        self.assertEqual((old, new), (old_copy, new_copy))

    def test_tuples_accepted(self):
        self.assertEqual(by_key(tuple(items('ab')), tuple(items('b'))), [make_delete(0)])


class TestTableDiff(unittest.TestCase):
    def test_edit_distance(self):
        differ = TableDiff(items('abc'), items('ac'), same_key, same_value)
        self.assertEqual(differ.max_d, 5)
        self.assertEqual(differ.get_edit_distance(), 1)
        self.assertEqual(TableDiff([], [], same_key).get_edit_distance(), 0)

    def test_updates_do_not_count(self):
        differ = TableDiff([Item('a', 1)], [Item('a', 2)], same_key, same_value)
        self.assertEqual(differ.get_edit_distance(), 0)

    def test_get_result(self):
        result = TableDiff(items('abc'), items('ac'), same_key, same_value).get_result()
        self.assertIsInstance(result, DiffResult)
        self.assertEqual(result.edit_distance, 1)
        self.assertEqual(result.retained_count, 2)
        self.assertEqual(result.update_count, 0)
        self.assertAlmostEqual(result.similarity_ratio, 0.8)

    def test_exhausted_search_raises(self):
        differ = TableDiff(['a'], ['b'], lambda a, b: a == b)
        differ.max_d = 1
        with self.assertRaises(DiffSearchError):
            differ.compute()

    def test_inconsistent_comparator_does_not_crash(self):
        changes = diff([3, 1, 2], [2, 3], lambda a, b: a < b, lambda a, b: False)
        self.assertIsInstance(changes, list)
        changes = diff([1, 2, 3], [4, 5], lambda a, b: True, lambda a, b: a == b)
        self.assertEqual(changes, [make_update(0), make_update(1), make_delete(2)])

    def test_identifiable_is_abstract(self):
        class Bare(Identifiable):
            pass
        with self.assertRaises(TypeError):
            Bare()


class TestMetrics(unittest.TestCase):
    def test_edit_distance_function(self):
        self.assertEqual(edit_distance(items('abc'), items('abc'), same_key), 0)
        self.assertEqual(edit_distance(items('ab'), items('cd'), same_key), 4)
        self.assertEqual(edit_distance(items('abcd'), items('axcy'), same_key), 4)
        self.assertEqual(edit_distance(items('ab'), items('b')), 1)


class TestApplyChanges(unittest.TestCase):
    def test_apply_basic(self):
        self.assertEqual(apply_changes([], [], []), [])
        self.assertEqual(apply_changes([], ['x'], [make_insert(0)]), ['x'])
        self.assertEqual(apply_changes(['x'], [], [make_delete(0)]), [])
        self.assertEqual(apply_changes(['a', 'b'], ['b', 'a'], [make_delete(0), make_insert(1)]),
                         ['b', 'a'])

    def test_apply_update_takes_new_content(self):
        old, new = [Item('a', 1), Item('b')], [Item('a', 2), Item('b')]
        self.assertEqual(apply_changes(old, new, [make_update(0)]), new)

    def test_apply_move(self):
        self.assertEqual(apply_changes(['a', 'b', 'c'], ['b', 'c', 'a'], [make_move(0, 2)]),
                         ['b', 'c', 'a'])

    def test_apply_roundtrip(self):
        old = [Item('a', 1), Item('b'), Item('c'), Item('d', 4)]
        new = [Item('c'), Item('a', 9), Item('e'), Item('d', 5)]
        self.assertEqual(apply_changes(old, new, by_key(old, new)), new)

    def test_apply_errors(self):
        with self.assertRaises(ValueError):
            apply_changes(['a'], ['a'], [make_delete(3)])
        with self.assertRaises(ValueError):
            apply_changes(['a'], ['a', 'b'], [make_insert(5)])
        with self.assertRaises(ValueError):
            apply_changes(['a', 'b'], ['a'], [make_delete(1), make_delete(1)])
        with self.assertRaises(ValueError):
            apply_changes(['a', 'b'], ['a', 'b'], [make_delete(0)])
        with self.assertRaises(ValueError):
            apply_changes(['a'], ['b'], [make_delete(0), make_insert(0), make_update(0)])


class TestEdgeCases(unittest.TestCase):
    def test_duplicate_identities(self):
        old, new = items('aaa'), items('aba')
        changes = by_key(old, new)
        self.assertEqual(len([c for c in changes if c.kind == ChangeType.INSERT]), 1)
        self.assertEqual(len([c for c in changes if c.kind == ChangeType.DELETE]), 1)
        self.assertEqual([i.key for i in apply_changes(old, new, changes)], list('aba'))

    def test_unicode_keys(self):
        changes = by_key([Item('привіт'), Item('світ')], [Item('привіт'), Item('мир')])
        self.assertEqual(changes, [make_delete(1), make_insert(1)])

    def test_long_common_prefix_and_suffix(self):
        old = items('abcdefgXhijk')
        new = items('abcdefgYhijk')
        self.assertEqual(by_key(old, new), [make_delete(7), make_insert(7)])


if __name__ == '__main__':
    unittest.main()
