"""Stage-by-stage run of the landscape analysis.

Every stage is a plain function over the previous stage's output. A stage
that fails its preconditions yields ``None``; stages depending on it are
skipped while independent ones still run.
"""

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import plotly.graph_objects as go

from landscape.config import (
    MIN_COOCCURRENCE,
    MIN_DEGREE,
    OUTPUT_DIR,
    RANDOM_SEED,
    TOP_K_DECADAL,
    TOP_K_YEARLY,
)
from landscape.cooccurrence import count_cooccurrences
from landscape.corpus import paper_frequencies
from landscape.errors import LandscapeError
from landscape.flows import decadal_flows, yearly_flows
from landscape.network import annotate_graph, build_graph, detect_communities, filter_graph, modularity
from landscape.statistics import corpus_summary, keyword_trend_pca, papers_per_year
from landscape.thematic import thematic_map
from landscape import visualization

logger = logging.getLogger(__name__)


class PipelineResult:
    """Outputs of every stage; any of them may be None."""

    def __init__(self):
        self.summary = None
        self.edges = None
        self.graph = None
        self.partition = None
        self.thematic = None
        self.medians = None
        self.yearly = None
        self.decadal = None
        self.trend_pca = None
        self.outputs = {}
        self.skipped = []


def run_stage(name, func, *args, **kwargs):
    """Run one stage, returning None with a diagnostic when it cannot proceed."""
    try:
        return func(*args, **kwargs)
    except LandscapeError as e:
        logger.warning("%s skipped (%s): %s", name, type(e).__name__, e)
        print(f"⚠️ {name} skipped: {e}")
        return None


def _build_network(records, min_cooccurrence, min_degree):
    edges = count_cooccurrences(records, min_count=min_cooccurrence)
    return edges, filter_graph(build_graph(edges), min_degree=min_degree)


def run_pipeline(records, output_dir=OUTPUT_DIR, min_cooccurrence=MIN_COOCCURRENCE,
                 min_degree=MIN_DEGREE, top_k_yearly=TOP_K_YEARLY, top_k_decadal=TOP_K_DECADAL,
                 seed=RANDOM_SEED, show=False, save=True):
    result = PipelineResult()
    output_dir = Path(output_dir)
    plotly_figures = {}

    def render(name, fig):
        is_plotly = isinstance(fig, go.Figure)
        if is_plotly:
            plotly_figures[name] = fig
        if show:
            if is_plotly:
                fig.show()
            else:
                plt.show()
        if save:
            result.outputs[name] = visualization.save_figure(fig, output_dir / name)
        elif not is_plotly:
            plt.close(fig)

    if records is None or records.empty:
        print("⚠️ No records to analyse.")
        result.skipped.append('corpus')
        return result

    result.summary = corpus_summary(records)
    print(f"📚 {result.summary['papers']} papers, {result.summary['keywords']} keywords "
          f"({result.summary['first_year']}-{result.summary['last_year']})")
    render('papers_per_year', visualization.papers_per_year_figure(papers_per_year(records)))

    # Network stages
    print("\n🔗 Building co-occurrence network...")
    network = run_stage("Co-occurrence network", _build_network, records, min_cooccurrence, min_degree)
    if network is not None:
        result.edges, result.graph = network
        print(f"   {result.graph.number_of_nodes()} keywords, {result.graph.number_of_edges()} links")
        result.partition = run_stage("Community detection", detect_communities, result.graph, seed=seed)
    else:
        result.skipped.append('network')

    frequencies = paper_frequencies(records)
    if result.partition is not None:
        annotate_graph(result.graph, result.partition, frequencies)
        q = modularity(result.graph, result.partition)
        result.summary['clusters'] = len(set(result.partition.values()))
        result.summary['modularity'] = q
        print(f"   {result.summary['clusters']} clusters, modularity {q:.3f}")
        render('keyword_network', visualization.network_figure(result.graph))

        thematic = run_stage("Thematic map", thematic_map, result.graph, result.partition, frequencies)
        if thematic is not None:
            result.thematic, result.medians = thematic
            result.summary['quadrants'] = {q: int(n) for q, n in result.thematic['quadrant'].value_counts().items()}
            render('thematic_map', visualization.thematic_map_figure(result.thematic, result.medians))
        else:
            result.skipped.append('thematic_map')
    elif network is not None:
        result.skipped.append('communities')

    # Temporal stages do not depend on the network
    print("\n🌊 Building keyword flows...")
    result.yearly = run_stage("Yearly flows", yearly_flows, records, top_k=top_k_yearly)
    if result.yearly is not None:
        render('yearly_sankey', visualization.sankey_figure(result.yearly, "Keywords by Year"))
    else:
        result.skipped.append('yearly_sankey')

    result.decadal = run_stage("Decadal flows", decadal_flows, records, top_k=top_k_decadal)
    if result.decadal is not None:
        render('decadal_sankey', visualization.sankey_figure(result.decadal, "Top Keywords by Decade"))
    else:
        result.skipped.append('decadal_sankey')

    pca = run_stage("Trend PCA", keyword_trend_pca, records, keywords=list(frequencies.head(top_k_yearly).index))
    if pca is not None:
        result.trend_pca = pca[0]
        render('trend_pca', visualization.trend_pca_figure(result.trend_pca))
    else:
        result.skipped.append('trend_pca')

    if save:
        result.outputs['dashboard'] = visualization.export_dashboard_json(
            plotly_figures, result.summary, output_dir / 'dashboard.json')

    return result
