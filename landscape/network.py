import logging
import math

import networkx as nx
from community import community_louvain

from landscape.config import MIN_DEGREE, RANDOM_SEED
from landscape.errors import DegenerateGraphError

logger = logging.getLogger(__name__)


def build_graph(edges):
    """Undirected weighted keyword graph from a (source, target, weight) edge list.

    Self-loops are skipped and repeated pairs are merged by summing weights,
    so the result is always a simple graph.
    """
    G = nx.Graph()
    for row in edges.itertuples(index=False):
        if row.source == row.target:
            continue
        if G.has_edge(row.source, row.target):
            G[row.source][row.target]['weight'] += int(row.weight)
        else:
            G.add_edge(row.source, row.target, weight=int(row.weight))
    return G


def filter_graph(G, min_degree=MIN_DEGREE):
    """Drop keywords with fewer than ``min_degree`` neighbours, then isolates.

    The degree filter runs once against the input graph; nodes whose degree
    falls below the threshold only because of removals are kept.
    """
    low_degree = [node for node, degree in G.degree() if degree < min_degree]
    H = G.copy()
    H.remove_nodes_from(low_degree)
    isolates = list(nx.isolates(H))
    H.remove_nodes_from(isolates)

    logger.debug("Removed %d low-degree and %d isolated nodes", len(low_degree), len(isolates))
    if H.number_of_nodes() == 0 or H.number_of_edges() == 0:
        raise DegenerateGraphError(f"No keyword has at least {min_degree} co-occurring neighbours")
    return H


def detect_communities(G, seed=RANDOM_SEED):
    """Louvain partition of ``G`` as {keyword: cluster id}.

    Cluster ids are renumbered so that 0 is the largest cluster.
    """
    if G.number_of_nodes() == 0:
        raise DegenerateGraphError("Cannot cluster an empty graph")

    raw = community_louvain.best_partition(G, weight='weight', random_state=seed)

    members = {}
    for node, cid in raw.items():
        members.setdefault(cid, []).append(node)
    ordered = sorted(members.values(), key=lambda nodes: (-len(nodes), min(nodes)))
    partition = {node: new_id for new_id, nodes in enumerate(ordered) for node in nodes}

    logger.info("Louvain found %d clusters over %d keywords", len(ordered), len(partition))
    return partition


def modularity(G, partition):
    if G.number_of_edges() == 0:
        return float('nan')
    return community_louvain.modularity(partition, G, weight='weight')


def annotate_graph(G, partition, frequencies):
    """Attach frequency, cluster and display size to every node in place."""
    for node in G.nodes:
        frequency = int(frequencies.get(node, 0))
        G.nodes[node]['frequency'] = frequency
        G.nodes[node]['cluster'] = partition.get(node, -1)
        G.nodes[node]['size'] = math.log1p(frequency)
    return G
