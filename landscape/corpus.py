import logging
import re

import numpy as np
import pandas as pd

from landscape.config import KEYWORD_VOCABULARY, KEYWORDS_PER_PAPER, N_PAPERS, RANDOM_SEED, YEAR_RANGE
from landscape.errors import EmptyInputError

logger = logging.getLogger(__name__)

RECORD_COLUMNS = ['paper_id', 'year', 'keyword']

# Accepted source column names, matched case-insensitively
column_mapping = {
    'paper_id': ['paper_id', 'paperid', 'id', 'doi', 'title'],
    'year': ['year', 'outputyear', 'publication_year', 'pubyear'],
    'keyword': ['keyword', 'term'],
}
keyword_list_columns = ['keywords', 'author keywords', 'author_keywords', 'terms', 'concepts']


def normalize_keyword(text):
    if not isinstance(text, str):
        return ""
    return re.sub(r'\s+', ' ', text).strip().lower()


def split_keywords(value):
    """Split a ';' or ',' delimited cell into normalized, non-empty keywords."""
    if not isinstance(value, str):
        return []
    parts = [normalize_keyword(part) for part in re.split(r'[;,]', value)]
    return [part for part in parts if part]


def normalize_records(df):
    """Return a clean (paper_id, year, keyword) table.

    Rows with a missing year, paper id or keyword are dropped, keywords are
    normalized, and each (paper_id, keyword) pair is kept once.
    """
    missing = [col for col in RECORD_COLUMNS if col not in df.columns]
    if missing:
        raise EmptyInputError(f"Corpus is missing columns: {', '.join(missing)}")

    records = df[RECORD_COLUMNS].copy()
    records['paper_id'] = pd.to_numeric(records['paper_id'], errors='coerce')
    records['year'] = pd.to_numeric(records['year'], errors='coerce')
    records['keyword'] = records['keyword'].map(normalize_keyword)
    records = records.dropna(subset=['paper_id', 'year'])
    records = records[records['keyword'] != ''].copy()

    records['paper_id'] = records['paper_id'].astype(int)
    records['year'] = records['year'].astype(int)
    records = records.drop_duplicates(subset=['paper_id', 'keyword'])

    if records.empty:
        raise EmptyInputError("No keyword records left after cleaning")

    logger.debug("Normalized %d records from %d input rows", len(records), len(df))
    return records.sort_values(RECORD_COLUMNS).reset_index(drop=True)


def simulate_corpus(n_papers=N_PAPERS, years=YEAR_RANGE, keywords_per_paper=KEYWORDS_PER_PAPER,
                    vocabulary=None, seed=RANDOM_SEED):
    """Draw a reproducible corpus from a fixed keyword vocabulary.

    Keyword popularity follows a Zipf-like curve so the co-occurrence
    network has a few hubs and a long tail.
    """
    vocabulary = list(vocabulary or KEYWORD_VOCABULARY)
    if not vocabulary or n_papers <= 0:
        raise EmptyInputError("Cannot simulate a corpus without papers or vocabulary")

    rng = np.random.default_rng(seed)
    popularity = 1.0 / np.arange(1, len(vocabulary) + 1)
    popularity = popularity / popularity.sum()
    low, high = keywords_per_paper
    high = min(high, len(vocabulary))
    low = min(low, high)

    rows = []
    for paper_id in range(1, n_papers + 1):
        year = int(rng.integers(years[0], years[1] + 1))
        n_keywords = int(rng.integers(low, high + 1))
        chosen = rng.choice(len(vocabulary), size=n_keywords, replace=False, p=popularity)
        for idx in chosen:
            rows.append({'paper_id': paper_id, 'year': year, 'keyword': vocabulary[idx]})

    return normalize_records(pd.DataFrame(rows, columns=RECORD_COLUMNS))


def _find_column(lower_columns, options):
    for option in options:
        if option in lower_columns:
            return lower_columns[option]
    return None


def load_corpus_csv(path):
    """Load a corpus from CSV in long (one keyword per row) or wide form.

    Wide files carry one row per paper and a delimited keywords column such
    as ``Keywords``; papers in a wide file are numbered by row.
    """
    df = pd.read_csv(path, dtype=str)
    lower_columns = {col.lower().strip(): col for col in df.columns}

    year_col = _find_column(lower_columns, column_mapping['year'])
    if year_col is None:
        raise EmptyInputError(f"{path}: no year column found")

    keyword_col = _find_column(lower_columns, column_mapping['keyword'])
    list_col = _find_column(lower_columns, keyword_list_columns)
    id_col = _find_column(lower_columns, column_mapping['paper_id'])

    if keyword_col is not None and id_col is not None:
        long_df = df[[id_col, year_col, keyword_col]].copy()
        long_df.columns = RECORD_COLUMNS
        # Non-integer ids (DOIs, titles, 1.2) are replaced by a stable integer code
        numeric_ids = pd.to_numeric(long_df['paper_id'], errors='coerce')
        if numeric_ids.isna().any() or (numeric_ids % 1 != 0).any():
            codes = pd.factorize(long_df['paper_id'])[0]
            long_df['paper_id'] = np.where(codes >= 0, codes + 1, np.nan)
        return normalize_records(long_df)

    if list_col is None:
        raise EmptyInputError(f"{path}: no keyword column found")

    wide = df[[year_col, list_col]].copy()
    wide['paper_id'] = range(1, len(wide) + 1)
    wide['keyword'] = wide[list_col].map(split_keywords)
    long_df = wide.explode('keyword').rename(columns={year_col: 'year'})
    return normalize_records(long_df[RECORD_COLUMNS])


def paper_frequencies(records):
    """Number of distinct papers tagged with each keyword."""
    deduped = records.drop_duplicates(subset=['paper_id', 'keyword'])
    counts = deduped.groupby('keyword')['paper_id'].nunique().reset_index(name='papers')
    counts = counts.sort_values(['papers', 'keyword'], ascending=[False, True])
    return counts.set_index('keyword')['papers']
