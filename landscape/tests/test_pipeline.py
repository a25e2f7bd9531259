import json
import tempfile
import unittest
from pathlib import Path

import matplotlib
matplotlib.use('Agg')

import pandas as pd

from landscape.corpus import simulate_corpus
from landscape.errors import DegenerateGraphError
from landscape.pipeline import run_pipeline, run_stage


class TestRunStage(unittest.TestCase):

    def test_landscape_error_becomes_none(self):
        def failing():
            raise DegenerateGraphError("nothing left")
        self.assertIsNone(run_stage("Failing stage", failing))

    def test_result_passed_through(self):
        self.assertEqual(run_stage("Adder", lambda a, b=0: a + b, 1, b=2), 3)

    def test_other_errors_propagate(self):
        def broken():
            raise ValueError("bug")
        with self.assertRaises(ValueError):
            run_stage("Broken stage", broken)


class TestRunPipeline(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.records = simulate_corpus(n_papers=300, seed=1)

    def test_all_stages_produce_output(self):
        result = run_pipeline(self.records, save=False)
        self.assertEqual(result.skipped, [])
        self.assertEqual(set(result.partition), set(result.graph.nodes))
        self.assertTrue(all(degree >= 1 for _, degree in result.graph.degree()))
        self.assertEqual(len(result.thematic), result.summary['clusters'])
        self.assertIsNotNone(result.yearly)
        self.assertIsNotNone(result.decadal)
        self.assertIsNotNone(result.trend_pca)

    def test_network_failure_does_not_stop_flows(self):
        result = run_pipeline(self.records, min_cooccurrence=10 ** 6, save=False)
        self.assertIn('network', result.skipped)
        self.assertIsNone(result.graph)
        self.assertIsNone(result.partition)
        self.assertIsNone(result.thematic)
        self.assertIsNotNone(result.yearly)
        self.assertIsNotNone(result.decadal)

    def test_empty_corpus(self):
        result = run_pipeline(pd.DataFrame(columns=['paper_id', 'year', 'keyword']), save=False)
        self.assertEqual(result.skipped, ['corpus'])
        self.assertIsNone(result.summary)

    def test_outputs_written(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            result = run_pipeline(self.records, output_dir=tmpdir)
            self.assertEqual(result.outputs['thematic_map'], Path(tmpdir) / 'thematic_map.html')
            self.assertEqual(result.outputs['keyword_network'], Path(tmpdir) / 'keyword_network.png')
            for path in result.outputs.values():
                self.assertTrue(path.exists(), path)

            with open(result.outputs['dashboard']) as f:
                dashboard = json.load(f)
            self.assertIn('thematic_map', dashboard['plots'])
            self.assertIn('decadal_sankey', dashboard['plots'])
            self.assertNotIn('keyword_network', dashboard['plots'])
            self.assertEqual(dashboard['stats']['papers'], 300)


if __name__ == '__main__':
    unittest.main()
