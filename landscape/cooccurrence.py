import logging
from collections import Counter
from itertools import combinations

import pandas as pd

from landscape.config import MIN_COOCCURRENCE
from landscape.errors import EmptyInputError

logger = logging.getLogger(__name__)

EDGE_COLUMNS = ['source', 'target', 'weight']


def paper_pairs(keywords):
    """Unordered keyword pairs of one paper, each pair once and sorted."""
    distinct = sorted(set(keywords))
    return list(combinations(distinct, 2))


def count_cooccurrences(records, min_count=MIN_COOCCURRENCE):
    """Count how many papers each keyword pair shares.

    Pairs are canonicalized as (smaller, larger) so (a, b) and (b, a) land in
    the same entry. Pairs seen in fewer than ``min_count`` papers are dropped.
    """
    if records is None or records.empty:
        raise EmptyInputError("No keyword records to pair")

    counts = Counter()
    for _, keywords in records.groupby('paper_id')['keyword']:
        counts.update(paper_pairs(keywords))

    edges = pd.DataFrame(
        [(a, b, n) for (a, b), n in counts.items() if n >= min_count],
        columns=EDGE_COLUMNS,
    )
    logger.debug("%d distinct pairs, %d with at least %d papers", len(counts), len(edges), min_count)

    if edges.empty:
        raise EmptyInputError(f"No keyword pair co-occurs in at least {min_count} papers")

    edges['weight'] = edges['weight'].astype(int)
    edges = edges.sort_values(['weight', 'source', 'target'], ascending=[False, True, True])
    return edges.reset_index(drop=True)
