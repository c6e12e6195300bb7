from krakel.game.boards import BoardCatalog, is_image_file, rotate_boards
from krakel.game.models import Player


def _players(*boards):
    return [Player(id=f'p{i}', name=f'P{i}', joined=True, board=b) for i, b in enumerate(boards)]


def test_available_lists_only_images(boards_dir):
    catalog = BoardCatalog(boards_dir, base_url='http://test')

    assert catalog.available() == ['b1.png', 'b2.png', 'b3.png']


def test_missing_directory_falls_back(tmp_path):
    catalog = BoardCatalog(tmp_path / 'nope', base_url='http://test', fallback='board1.jpg')

    assert catalog.available() == ['board1.jpg']
    assert catalog.pick() == 'board1.jpg'
    assert catalog.describe() == []


def test_empty_directory_falls_back(tmp_path):
    catalog = BoardCatalog(tmp_path, base_url='http://test', fallback='default.png')

    assert catalog.available() == ['default.png']


def test_image_extension_check_is_case_insensitive():
    assert is_image_file('Castle.JPG')
    assert is_image_file('x.bmp')
    assert not is_image_file('notes.txt')


def test_url_and_description(boards_dir):
    catalog = BoardCatalog(boards_dir, base_url='http://host:5000/')

    assert catalog.url_for('b2.png') == 'http://host:5000/boards/b2.png'
    assert catalog.url_for(None) is None
    assert catalog.describe()[0] == {
        'filename': 'b1.png',
        'url': 'http://host:5000/boards/b1.png',
        'name': 'b1',
    }


def test_rotation_takes_the_next_players_board():
    players = _players('b1', 'b2', 'b3')

    rotate_boards(players)

    assert [p.board for p in players] == ['b2', 'b3', 'b1']


def test_rotation_is_a_single_cycle_without_fixed_points():
    boards = ['b0', 'b1', 'b2', 'b3', 'b4']
    players = _players(*boards)
    before = {p.id: p.board for p in players}

    rotate_boards(players)

    after = {p.id: p.board for p in players}
    assert all(after[pid] != before[pid] for pid in before)

    # Follow board ownership: who held my new board before?
    holder = {board: pid for pid, board in before.items()}
    start = players[0].id
    seen = [start]
    current = holder[after[start]]
    while current != start:
        seen.append(current)
        current = holder[after[current]]
    assert len(seen) == len(players)


def test_single_player_keeps_their_board():
    players = _players('b1')

    rotate_boards(players)

    assert players[0].board == 'b1'
