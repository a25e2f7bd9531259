"""Callon thematic map: cluster centrality versus density.

Density sums the weights of edges inside a cluster, centrality the weights
of edges leaving it. Each cluster is placed in one of four quadrants by
comparing both values to their medians across clusters.
"""

import logging
import math

import pandas as pd

from landscape.config import LABEL_MAX_CHARS
from landscape.errors import DegenerateGraphError, NumericDegeneracyError

logger = logging.getLogger(__name__)

MOTOR = 'Motor Themes'
NICHE = 'Niche Themes'
BASIC = 'Basic Themes'
EMERGING = 'Emerging/Declining Themes'
QUADRANTS = [MOTOR, NICHE, BASIC, EMERGING]


def cluster_metrics(G, partition):
    """Return {cluster: {'centrality': float, 'density': float}}.

    A boundary edge adds its weight to the centrality of both clusters it
    joins, so sum(density) + sum(centrality) / 2 equals the total edge weight.
    """
    metrics = {cid: {'centrality': 0.0, 'density': 0.0} for cid in set(partition.values())}
    for u, v, weight in G.edges(data='weight', default=1):
        if not math.isfinite(weight):
            raise NumericDegeneracyError(f"Edge ({u}, {v}) has non-finite weight {weight}")
        cu, cv = partition[u], partition[v]
        if cu == cv:
            metrics[cu]['density'] += weight
        else:
            metrics[cu]['centrality'] += weight
            metrics[cv]['centrality'] += weight
    return metrics


def classify_quadrant(centrality, density, median_centrality, median_density):
    high_centrality = centrality >= median_centrality
    high_density = density >= median_density
    if high_centrality and high_density:
        return MOTOR
    if high_density:
        return NICHE
    if high_centrality:
        return BASIC
    return EMERGING


def _finite_or_zero(value, name):
    if value is None or not math.isfinite(value):
        logger.warning("Median %s is not finite (%s), using 0", name, value)
        return 0.0
    return float(value)


def truncate_label(text, max_chars=LABEL_MAX_CHARS):
    if len(text) <= max_chars:
        return text
    return text[:max_chars - 1].rstrip() + '…'


def thematic_map(G, partition, frequencies, label_max_chars=LABEL_MAX_CHARS):
    """Build the per-cluster thematic table and the medians used to split it.

    Each cluster is labelled with its most frequent keyword (alphabetical on
    ties). Returns ``(table, {'centrality': median, 'density': median})``.
    """
    if not partition:
        raise DegenerateGraphError("No clusters to place on the thematic map")

    metrics = cluster_metrics(G, partition)

    members = {}
    for node, cid in partition.items():
        members.setdefault(cid, []).append(node)

    rows = []
    for cid in sorted(members):
        nodes = sorted(members[cid], key=lambda node: (-int(frequencies.get(node, 0)), node))
        rows.append({
            'cluster': cid,
            'label': truncate_label(nodes[0], label_max_chars),
            'keywords': ', '.join(nodes),
            'n_keywords': len(nodes),
            'frequency': int(sum(int(frequencies.get(node, 0)) for node in nodes)),
            'centrality': metrics[cid]['centrality'],
            'density': metrics[cid]['density'],
        })
    table = pd.DataFrame(rows)

    medians = {
        'centrality': _finite_or_zero(table['centrality'].median(), 'centrality'),
        'density': _finite_or_zero(table['density'].median(), 'density'),
    }
    table['quadrant'] = [
        classify_quadrant(c, d, medians['centrality'], medians['density'])
        for c, d in zip(table['centrality'], table['density'])
    ]
    return table, medians
