from flask import Blueprint, jsonify, request
from lota import get_session
from lota.services.games.payout import PRIZE_SHARES


session_api = Blueprint('session_api', __name__)


@session_api.route('/state', methods=['GET'])
def get_state():
    """
    Returns the same full snapshot that is pushed over the socket as `sync`.
    """
    return jsonify(get_session().snapshot())


@session_api.route('/payouts', methods=['GET'])
def get_payouts():
    """
    Returns the prize shares per place for a winners count (defaults to the
    current game's), with the amounts for the current pot.
    """
    session = get_session()
    winners_count = request.args.get('winners_count', type=int)
    if winners_count is None:
        winners_count = session.config.winners_count
    shares = PRIZE_SHARES.get(winners_count)
    if shares is None:
        return jsonify({'error': 'winners_count must be 1, 2 or 3'}), 400

    total_pot = session.results.total_pot
    return jsonify({
        'winners_count': winners_count,
        'total_pot': total_pot,
        'places': [
            {'place': place, 'share': share, 'prize': total_pot * share}
            for place, share in enumerate(shares, start=1)
        ],
    }), 200
