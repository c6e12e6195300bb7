from krakel.game import voting
from krakel.game.models import Player

ALL_WORDS = ['ant', 'bee', 'cat', 'dog', 'owl', 'sun']


def _phase():
    players = [
        Player(id='p1', name='Ada', joined=True, word='cat'),
        Player(id='p2', name='Bo', joined=True, word='dog'),
        Player(id='p3', name='Cy', joined=True, word='sun'),
    ]
    return voting.open_voting(players)


def _vote(phase, player_id, word, present=('p1', 'p2', 'p3')):
    assert voting.can_vote(phase, player_id, word, ALL_WORDS)
    voting.cast_vote(phase, player_id, word)
    return voting.advance(phase, set(present))


def test_turn_order_is_a_snapshot():
    phase = _phase()

    assert [s.player_id for s in phase.turn_order] == ['p1', 'p2', 'p3']
    assert voting.current_slot(phase).name == 'Ada'
    assert not phase.complete


def test_only_the_current_player_may_vote():
    phase = _phase()

    assert not voting.can_vote(phase, 'p2', 'ant', ALL_WORDS)
    assert voting.can_vote(phase, 'p1', 'ant', ALL_WORDS)


def test_unknown_words_are_rejected():
    phase = _phase()
    _vote(phase, 'p1', 'ant')

    assert not voting.can_vote(phase, 'p2', 'zebra', ALL_WORDS)


def test_repeated_word_uses_up_the_turn():
    phase = _phase()
    _vote(phase, 'p1', 'ant')

    slot = _vote(phase, 'p2', 'ant')

    assert slot.player_id == 'p3'
    assert phase.current_turn_index == 2
    assert phase.eliminated_words == {'ant'}
    assert voting.voted_words(phase) == ['ant']
    assert phase.votes_by_player == {'p1': 'ant', 'p2': 'ant'}


def test_no_phase_rejects_votes():
    assert not voting.can_vote(None, 'p1', 'ant', ALL_WORDS)


def test_completes_after_one_vote_per_player():
    phase = _phase()

    assert _vote(phase, 'p1', 'ant').player_id == 'p2'
    assert _vote(phase, 'p2', 'bee').player_id == 'p3'
    assert _vote(phase, 'p3', 'owl') is None

    assert phase.complete
    assert phase.current_turn_index == 3
    assert not voting.can_vote(phase, 'p1', 'cat', ALL_WORDS)


def test_tally_counts_surviving_player_words():
    phase = _phase()
    _vote(phase, 'p1', 'ant')
    _vote(phase, 'p2', 'cat')
    _vote(phase, 'p3', 'owl')

    result = voting.tally(phase, ALL_WORDS)

    assert result.score == '2/3'
    assert result.correct_words == 2
    assert result.total_players == 3
    assert result.remaining_words == ['bee', 'dog', 'sun']
    assert result.remaining_player_words == ['dog', 'sun']
    assert result.remaining_filler_words == ['bee']
    assert result.voted_words == ['ant', 'cat', 'owl']
    assert result.voted_player_words == ['cat']
    assert result.voted_filler_words == ['ant', 'owl']
    assert result.player_votes == {'p1': 'ant', 'p2': 'cat', 'p3': 'owl'}


def test_advance_skips_departed_players():
    phase = _phase()

    slot = _vote(phase, 'p1', 'ant', present=('p1', 'p3'))

    assert slot.player_id == 'p3'
    assert phase.current_turn_index == 2


def test_departure_of_the_last_voters_completes_the_phase():
    phase = _phase()
    _vote(phase, 'p1', 'ant')

    assert voting.advance(phase, {'p1'}) is None
    assert phase.complete

    result = voting.tally(phase, ALL_WORDS)
    assert result.score == '3/3'
