"""Fetch a keyword corpus from the OpenAlex works API."""

import logging
from time import sleep
from typing import Dict, List, Optional

import pandas as pd
import requests
from tqdm import tqdm

from landscape.config import (
    MAX_RETRIES,
    MIN_CONCEPT_SCORE,
    OPENALEX_API_URL,
    OPENALEX_MAX_RESULTS,
    OPENALEX_PER_PAGE,
    REQUEST_DELAY,
    RETRY_BACKOFF,
)
from landscape.corpus import RECORD_COLUMNS, normalize_keyword, normalize_records
from landscape.errors import EmptyInputError

logger = logging.getLogger(__name__)

# Session object for connection pooling
session = requests.Session()


def retry_delay(retry_after, attempt):
    """Seconds to wait before the next attempt.

    Retry-After may also be an HTTP date; anything but a number of seconds
    falls back to the backoff schedule.
    """
    try:
        return max(0, int(retry_after))
    except (TypeError, ValueError):
        return RETRY_BACKOFF[attempt]


def safe_api_call(url: str, params: Optional[Dict] = None) -> Optional[Dict]:
    for attempt in range(MAX_RETRIES):
        try:
            response = session.get(url, params=params, timeout=30)
            if response.status_code == 429:
                if attempt == MAX_RETRIES - 1:
                    logger.warning("OpenAlex still rate limited after %d attempts", MAX_RETRIES)
                    return None
                sleep(retry_delay(response.headers.get('Retry-After'), attempt))
                continue
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            if attempt == MAX_RETRIES - 1:
                logger.warning("OpenAlex call failed after %d attempts: %s", MAX_RETRIES, e)
                return None
            sleep(RETRY_BACKOFF[attempt])
    return None


def work_keywords(work: Dict, min_concept_score: float = MIN_CONCEPT_SCORE) -> List[str]:
    """Keywords of one OpenAlex work, falling back to scored concepts."""
    keywords = [normalize_keyword(kw.get('display_name')) for kw in work.get('keywords') or []]
    if not any(keywords):
        keywords = [
            normalize_keyword(concept.get('display_name'))
            for concept in work.get('concepts') or []
            if (concept.get('score') or 0) >= min_concept_score
        ]
    seen = []
    for kw in keywords:
        if kw and kw not in seen:
            seen.append(kw)
    return seen


def fetch_openalex_corpus(query: str, max_results: int = OPENALEX_MAX_RESULTS,
                          per_page: int = OPENALEX_PER_PAGE, mailto: Optional[str] = None) -> pd.DataFrame:
    """Search OpenAlex and return a normalized (paper_id, year, keyword) table.

    Works are paged with OpenAlex cursors; paper ids are assigned in the
    order works are returned.
    """
    params = {
        'search': query,
        'per-page': min(per_page, max_results),
        'cursor': '*',
        'select': 'id,publication_year,keywords,concepts',
    }
    if mailto:
        params['mailto'] = mailto

    rows = []
    fetched = 0
    with tqdm(total=max_results, desc="Fetching OpenAlex works") as progress:
        while fetched < max_results:
            data = safe_api_call(OPENALEX_API_URL, params=params)
            if not data:
                break
            results = data.get('results') or []
            if not results:
                break

            for work in results[:max_results - fetched]:
                fetched += 1
                year = work.get('publication_year')
                if not year:
                    continue
                for kw in work_keywords(work):
                    rows.append({'paper_id': fetched, 'year': year, 'keyword': kw})
            progress.update(min(len(results), progress.total - progress.n))

            next_cursor = (data.get('meta') or {}).get('next_cursor')
            if not next_cursor:
                break
            params['cursor'] = next_cursor
            sleep(REQUEST_DELAY)

    logger.info("Fetched %d works (%d keyword records) for %r", fetched, len(rows), query)
    if not rows:
        raise EmptyInputError(f"OpenAlex returned no keyworded works for {query!r}")
    return normalize_records(pd.DataFrame(rows, columns=RECORD_COLUMNS))
