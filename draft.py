"""
Draft Assistant Module
Suggests the next pick from an ordered player pool
"""

from errors import InvalidInput

NO_PLAYER_AVAILABLE = 'No player available'


def suggest_best_pick(current_team=None, available_players=None):
    """Return the first player in the pool not already on the team."""
    if current_team is None:
        current_team = []
    if available_players is None:
        available_players = []

    if not isinstance(available_players, (list, tuple)):
        raise InvalidInput(
            f"available_players must be a list, got {type(available_players).__name__}"
        )

    taken = set(current_team)
    for player in available_players:
        if player not in taken:
            return player
    return NO_PLAYER_AVAILABLE


def parse_player_list(raw):
    """Split a comma-separated query value into trimmed, non-empty names"""
    if not raw:
        return []
    return [name.strip() for name in raw.split(',') if name.strip()]
