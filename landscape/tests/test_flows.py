import unittest

import pandas as pd

from landscape.errors import EmptyInputError
from landscape.flows import decadal_flows, decade_of, top_keywords, yearly_flows
from landscape.tests.test_cooccurrence import SMALL_CORPUS, _records


class TestTopKeywords(unittest.TestCase):

    def test_ties_alphabetical(self):
        self.assertEqual(top_keywords(_records(SMALL_CORPUS), 2), ["a", "b"])


class TestYearlyFlows(unittest.TestCase):

    def test_nodes_and_values(self):
        flow = yearly_flows(_records(SMALL_CORPUS), top_k=2)
        self.assertEqual(flow.nodes, ["2020", "2021", "a", "b"])
        links = [(flow.nodes[s], flow.nodes[t], v)
                 for s, t, v in flow.links[['source', 'target', 'value']].itertuples(index=False)]
        self.assertEqual(links, [("2020", "a", 2), ("2020", "b", 2), ("2021", "a", 1)])

    def test_repeated_tag_counted_once(self):
        records = _records({1: (2020, ["a", "a", "b"]), 2: (2020, ["a"])})
        flow = yearly_flows(records, top_k=1)
        self.assertEqual(flow.links['value'].tolist(), [2])

    def test_years_strictly_ordered(self):
        records = _records({1: (2022, ["a"]), 2: (2019, ["a"]), 3: (2020, ["a"])})
        flow = yearly_flows(records, top_k=1)
        self.assertEqual(flow.nodes[:3], ["2019", "2020", "2022"])

    def test_values_are_positive_integers(self):
        flow = yearly_flows(_records(SMALL_CORPUS), top_k=3)
        self.assertTrue((flow.links['value'] > 0).all())
        self.assertEqual(flow.links['value'].dtype.kind, 'i')

    def test_keyword_spelled_like_a_year(self):
        records = _records({1: (2020, ["2020", "x"]), 2: (2021, ["2020"])})
        flow = yearly_flows(records, top_k=2)
        self.assertEqual(flow.nodes, ["2020", "2021", "2020", "x"])
        links = list(flow.links[['source', 'target', 'value']].itertuples(index=False, name=None))
        self.assertEqual(links, [(0, 2, 1), (0, 3, 1), (1, 2, 1)])
        self.assertFalse((flow.links['source'] == flow.links['target']).any())

    def test_empty_records_raise(self):
        with self.assertRaises(EmptyInputError):
            yearly_flows(pd.DataFrame(columns=['paper_id', 'year', 'keyword']))


class TestDecadalFlows(unittest.TestCase):

    def test_decade_of(self):
        self.assertEqual(decade_of(1999), 1990)
        self.assertEqual(decade_of(2000), 2000)
        self.assertEqual(decade_of(2024), 2020)

    def test_links_between_consecutive_decades(self):
        records = _records({
            1: (1995, ["a", "b"]),
            2: (1998, ["a", "c"]),
            3: (2003, ["a", "b"]),
            4: (2005, ["c"]),
            5: (2012, ["a", "b"]),
            6: (2015, ["b"]),
        })
        flow = decadal_flows(records, top_k=2)
        self.assertEqual(flow.nodes, ["1990s: a", "1990s: b", "2000s: a", "2000s: b",
                                      "2010s: b", "2010s: a"])
        links = {(row.source_period, row.target_period, row.keyword): row.value
                 for row in flow.links.itertuples()}
        self.assertEqual(links, {
            (1990, 2000, "a"): 1,
            (1990, 2000, "b"): 1,
            (2000, 2010, "a"): 1,
            (2000, 2010, "b"): 2,
        })

    def test_no_link_across_a_gap(self):
        # x is top in the 1990s and 2010s but not the 2000s
        records = _records({
            1: (1991, ["x", "y"]),
            2: (1992, ["x"]),
            3: (2001, ["y", "z"]),
            4: (2002, ["z"]),
            5: (2011, ["x", "y"]),
            6: (2012, ["x"]),
        })
        flow = decadal_flows(records, top_k=2)
        self.assertNotIn("x", set(flow.links['keyword']))
        self.assertEqual(set(flow.links['keyword']), {"y"})
        spans = set(zip(flow.links['source_period'], flow.links['target_period']))
        self.assertEqual(spans, {(1990, 2000), (2000, 2010)})
        self.assertIn("1990s: x", flow.nodes)
        self.assertIn("2010s: x", flow.nodes)

    def test_empty_decade_breaks_tracks(self):
        records = _records({1: (1995, ["a", "b"]), 2: (2015, ["a", "b"])})
        with self.assertRaises(EmptyInputError):
            decadal_flows(records, top_k=2)

    def test_no_link_over_an_empty_decade(self):
        records = _records({
            1: (1995, ["a", "b"]),
            2: (2005, ["a", "b"]),
            3: (2021, ["a", "b"]),
        })
        flow = decadal_flows(records, top_k=2)
        spans = set(zip(flow.links['source_period'], flow.links['target_period']))
        self.assertEqual(spans, {(1990, 2000)})
        self.assertIn("2020s: a", flow.nodes)

    def test_keyword_outside_top_k_has_no_link(self):
        records = _records({
            1: (1995, ["a", "b"]),
            2: (1996, ["a"]),
            3: (2005, ["a", "b"]),
            4: (2006, ["a"]),
        })
        flow = decadal_flows(records, top_k=1)
        self.assertEqual(flow.links['keyword'].tolist(), ["a"])
        self.assertEqual(flow.links['value'].tolist(), [2])

    def test_single_decade_raises(self):
        records = _records({1: (2001, ["a", "b"]), 2: (2009, ["a"])})
        with self.assertRaises(EmptyInputError):
            decadal_flows(records, top_k=2)


if __name__ == '__main__':
    unittest.main()
