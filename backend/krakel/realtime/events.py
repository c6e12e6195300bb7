# Inbound (connection -> server)
SET_PLAYER_NAME = "setPlayerName"
SUBMIT_DRAWING = "submitDrawing"
UNSUBMIT_DRAWING = "unsubmitDrawing"
VOTE_WORD = "voteWord"
NEW_ROUND = "newRound"

# Outbound, player-targeted
WORD_ASSIGNED = "wordAssigned"
NEW_WORD = "newWord"
NEW_BOARD = "newBoard"

# Outbound, room-wide
PLAYER_COUNT = "playerCount"
PLAYER_LIST = "playerList"
ALL_SUBMITTED = "allSubmitted"
GAME_RESULTS = "gameResults"
VOTING_STARTED = "votingStarted"
WORD_VOTED_OUT = "wordVotedOut"
NEXT_PLAYER_TURN = "nextPlayerTurn"
VOTING_COMPLETE = "votingComplete"
NEW_ROUND_STARTED = "newRoundStarted"
