"""
Draft Helper Routes
Flask routes for pick suggestions, player insights and consensus rankings.
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from draft import parse_player_list, suggest_best_pick

logger = logging.getLogger(__name__)

# Create Blueprint
draft_bp = Blueprint('draft', __name__)


@draft_bp.route('/suggest')
def suggest():
    """
    Suggest the next pick

    Query params:
        team: comma-separated players already on the team
        pool: comma-separated available players, best first
    """
    current_team = parse_player_list(request.args.get('team'))
    available_players = parse_player_list(request.args.get('pool'))

    pick = suggest_best_pick(current_team, available_players)
    return jsonify({'pick': pick})


@draft_bp.route('/insights/<player>')
def player_insight(player):
    """AI-generated analysis for one player"""
    try:
        insight = current_app.extensions['draft_assistant'].insights.get_insight(player)
        return jsonify({'player': player, 'insight': insight})
    except Exception as e:
        logger.error(f"Error generating insight for {player}: {e}")
        return jsonify({'success': False, 'error': 'Failed to generate insight'}), 500


@draft_bp.route('/rankings/ppr')
def ppr_rankings():
    """FantasyPros PPR consensus rankings"""
    try:
        rankings = current_app.extensions['draft_assistant'].rankings.fetch_rankings()
        return jsonify([entry.to_dict() for entry in rankings])
    except Exception as e:
        logger.error(f"Error fetching PPR rankings: {e}")
        return jsonify({'success': False, 'error': 'Failed to fetch rankings'}), 500
