"""
Sleeper service package: upstream client, record parsing, fallback board and
the cached player directory built on top of them.
"""

from .client import SleeperAPIError, SleeperClient, sleeper_get
from .fallback import NFL_TEAMS, POSITIONS, fallback_players, fallback_trending
from .parsers import MISSING_RANK, directory_sort_key, normalize_player, parse_players_payload
from .players import ALL_POSITIONS, DirectoryResult, PlayerDirectory, resolve_position
