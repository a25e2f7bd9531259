import logging

import pandas as pd
from sklearn.decomposition import PCA
from sklearn.preprocessing import StandardScaler

from landscape.corpus import paper_frequencies
from landscape.errors import EmptyInputError

logger = logging.getLogger(__name__)


def papers_per_year(records):
    counts = records.groupby('year')['paper_id'].nunique().sort_index()
    year_counts = counts.reset_index()
    year_counts.columns = ['year', 'papers']
    return year_counts


def keyword_year_matrix(records, keywords=None):
    """Year x keyword matrix of paper counts."""
    if keywords is not None:
        records = records[records['keyword'].isin(keywords)]
    deduped = records.drop_duplicates(subset=['paper_id', 'keyword'])
    return deduped.pivot_table(index='year', columns='keyword', values='paper_id',
                               aggfunc='nunique', fill_value=0)


def keyword_trend_pca(records, n_components=2, keywords=None):
    """Project each year onto the principal components of its keyword mix.

    Returns ``(pca_df, pca)`` where ``pca_df`` is indexed by year with one
    ``PC<n>`` column per component.
    """
    matrix = keyword_year_matrix(records, keywords)
    if matrix.shape[0] < 2 or matrix.shape[1] < 1:
        raise EmptyInputError("Need at least two years of keyword counts for PCA")

    n_components = max(1, min(n_components, matrix.shape[0], matrix.shape[1]))
    matrix_std = StandardScaler().fit_transform(matrix)

    pca = PCA(n_components=n_components)
    components = pca.fit_transform(matrix_std)
    logger.debug("Explained variance ratio: %s", pca.explained_variance_ratio_)

    pca_df = pd.DataFrame(components,
                          index=matrix.index,
                          columns=[f'PC{i+1}' for i in range(n_components)])
    return pca_df, pca


def corpus_summary(records, top_n=10):
    frequencies = paper_frequencies(records)
    return {
        'papers': int(records['paper_id'].nunique()),
        'keywords': int(records['keyword'].nunique()),
        'records': int(len(records)),
        'first_year': int(records['year'].min()),
        'last_year': int(records['year'].max()),
        'top_keywords': {kw: int(n) for kw, n in frequencies.head(top_n).items()},
    }
