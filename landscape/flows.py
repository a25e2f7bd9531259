"""Keyword flows across time buckets, shaped for Sankey diagrams."""

import logging

import pandas as pd

from landscape.config import TOP_K_DECADAL, TOP_K_YEARLY
from landscape.corpus import paper_frequencies
from landscape.errors import EmptyInputError

logger = logging.getLogger(__name__)

LINK_COLUMNS = ['source', 'target', 'source_period', 'target_period', 'keyword', 'value']


class FlowDiagram:
    """Ordered node labels plus links that index into them."""

    def __init__(self, nodes, links):
        self.nodes = list(nodes)
        self.links = links

    def __repr__(self):
        return f"FlowDiagram({len(self.nodes)} nodes, {len(self.links)} links)"


def top_keywords(records, k):
    """The ``k`` keywords found in the most papers, ties broken alphabetically."""
    return list(paper_frequencies(records).head(k).index)


def decade_of(year):
    return (int(year) // 10) * 10


def _counts(records, period_col):
    deduped = records.drop_duplicates(subset=['paper_id', 'keyword'])
    return deduped.groupby([period_col, 'keyword'])['paper_id'].nunique()


def yearly_flows(records, top_k=TOP_K_YEARLY):
    """Year -> keyword flows for the overall top-K keywords.

    Nodes are the years present (ascending) followed by the top-K keywords.
    Each link carries the number of papers from that year tagged with the
    keyword; pairs with no papers produce no link.
    """
    if records is None or records.empty:
        raise EmptyInputError("No records for yearly flows")

    years = sorted(int(y) for y in records['year'].unique())
    keywords = top_keywords(records, top_k)
    nodes = [str(year) for year in years] + keywords
    index = {('year', year): i for i, year in enumerate(years)}
    index.update({('keyword', kw): len(years) + i for i, kw in enumerate(keywords)})

    counts = _counts(records[records['keyword'].isin(keywords)], 'year')
    links = [
        {
            'source': index[('year', int(year))],
            'target': index[('keyword', kw)],
            'source_period': int(year),
            'target_period': None,
            'keyword': kw,
            'value': int(value),
        }
        for (year, kw), value in counts.items()
        if value > 0
    ]
    if not links:
        raise EmptyInputError("No yearly flows to draw")

    links = pd.DataFrame(links, columns=LINK_COLUMNS).sort_values(['source_period', 'target'])
    return FlowDiagram(nodes, links.reset_index(drop=True))


def decadal_flows(records, top_k=TOP_K_DECADAL):
    """Decade -> decade flows of keywords that stay in consecutive top-K lists.

    Each decade keeps its own top-K keywords. A keyword is linked from one
    decade to the following decade only when it is in both top-K lists;
    the link value is its paper count in the later decade. A keyword that
    drops out and comes back, or spans a decade without papers, is not
    bridged across the gap.
    """
    if records is None or records.empty:
        raise EmptyInputError("No records for decadal flows")

    records = records.assign(decade=records['year'].map(decade_of))
    decades = sorted(int(d) for d in records['decade'].unique())
    top_by_decade = {
        decade: top_keywords(records[records['decade'] == decade], top_k)
        for decade in decades
    }
    counts = _counts(records, 'decade')

    nodes = []
    index = {}
    for decade in decades:
        for kw in top_by_decade[decade]:
            index[(decade, kw)] = len(nodes)
            nodes.append(f"{decade}s: {kw}")

    links = []
    for earlier, later in zip(decades, decades[1:]):
        # An empty decade in between breaks every track
        if later != earlier + 10:
            continue
        shared = [kw for kw in top_by_decade[earlier] if kw in top_by_decade[later]]
        for kw in shared:
            links.append({
                'source': index[(earlier, kw)],
                'target': index[(later, kw)],
                'source_period': earlier,
                'target_period': later,
                'keyword': kw,
                'value': int(counts.get((later, kw), 0)),
            })

    logger.debug("%d decades, %d decade-keyword nodes, %d links", len(decades), len(nodes), len(links))
    if not links:
        raise EmptyInputError("No keyword stays in the top list across consecutive decades")
    return FlowDiagram(nodes, pd.DataFrame(links, columns=LINK_COLUMNS))
