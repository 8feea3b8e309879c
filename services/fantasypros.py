"""
FantasyPros Rankings Fetcher
Pulls the PPR consensus cheat sheet CSV export and parses it into ranked players.
"""

import csv
import logging
import re
from dataclasses import dataclass
from typing import List, Optional

import requests

from errors import RankingFetchFailed
from yahoo_integration.config import FANTASYPROS_PPR_CSV_URL, DEFAULT_HTTP_TIMEOUT

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*\+?(\d+)")


@dataclass
class RankingEntry:
    """One row of a consensus ranking"""
    rank: int
    player: str

    def to_dict(self):
        return {'rank': self.rank, 'player': self.player}


def _parse_rank(value: str) -> Optional[int]:
    match = _LEADING_INT.match(value)
    if not match:
        return None
    rank = int(match.group(1))
    return rank if rank > 0 else None


def parse_rankings_csv(text: str) -> List[RankingEntry]:
    """
    Parse a rankings CSV, keeping file order

    The first line is a header. Rows whose rank is not a positive integer or
    whose player name is blank are dropped.
    """
    lines = text.splitlines()[1:]
    rankings = []

    for line in lines:
        if not line.strip():
            continue
        # One line per row, so a stray quote cannot swallow the lines after it
        try:
            row = next(csv.reader([line]), [])
        except csv.Error:
            continue
        if len(row) < 2:
            continue
        rank = _parse_rank(row[0])
        player = row[1].strip()
        if rank is None or not player:
            continue
        rankings.append(RankingEntry(rank=rank, player=player))

    return rankings


class FantasyProsRankings:
    """Fetches FantasyPros PPR consensus rankings"""

    HEADERS = {
        'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36',
        'Accept': 'text/csv,text/plain,*/*;q=0.8',
        'Accept-Language': 'en-US,en;q=0.9',
    }

    def __init__(self, http: Optional[requests.Session] = None, url: str = FANTASYPROS_PPR_CSV_URL,
                 timeout: float = DEFAULT_HTTP_TIMEOUT):
        self.url = url
        self.timeout = timeout
        self.session = http or requests.Session()
        self.session.headers.update(self.HEADERS)

    def fetch_rankings(self) -> List[RankingEntry]:
        """
        Download and parse the PPR cheat sheet

        Raises:
            RankingFetchFailed: on network errors or a non-2xx response
        """
        try:
            response = self.session.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            raise RankingFetchFailed(f"Failed to fetch rankings: {e}") from e

        if not 200 <= response.status_code < 300:
            raise RankingFetchFailed("Failed to fetch rankings", status=response.status_code, body=response.text)

        rankings = parse_rankings_csv(response.text)
        logger.info(f"Parsed {len(rankings)} ranked players from FantasyPros")
        return rankings
