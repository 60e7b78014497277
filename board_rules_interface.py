#board_rules_interface.py
import logging
import numpy as np
from typing import List, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)

BOARD_SIZE = 7

EMPTY = 0
PLAYER_A = 1
PLAYER_B = 2
DRAW = -1  # winner() result, never a cell value

SYMBOLS = {EMPTY: '.', PLAYER_A: 'X', PLAYER_B: 'O'}

# Up, left, right, down: destinations of one source come out in row-major order
DIRECTIONS = ((-1, 0), (0, -1), (0, 1), (1, 0))

Square = Tuple[int, int]


class ConfigurationError(ValueError):
    """Raised when game or agent settings are out of range."""


class Move(NamedTuple):
    src: Square
    dst: Square


def opponent_of(player: int) -> int:
    return 3 - player


class GameState:
    def __init__(self, board: np.ndarray, current_player: int = PLAYER_A, remaining_turns: int = 0):
        self.board = board
        self.current_player = current_player
        self.remaining_turns = remaining_turns

    @classmethod
    def empty(cls, board_size: int = BOARD_SIZE, current_player: int = PLAYER_A, remaining_turns: int = 0):
        return cls(np.zeros((board_size, board_size), dtype=np.int8), current_player, remaining_turns)

    @property
    def size(self) -> int:
        return self.board.shape[0]

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def is_legal(self, move: Move) -> bool:
        return self._is_legal_for(move, self.current_player)

    def _is_legal_for(self, move: Move, player: int) -> bool:
        (src_row, src_col), (dst_row, dst_col) = move
        if not (self.in_bounds(src_row, src_col) and self.in_bounds(dst_row, dst_col)):
            return False
        if self.board[src_row, src_col] != player:
            return False
        if self.board[dst_row, dst_col] != EMPTY:
            return False
        return abs(src_row - dst_row) + abs(src_col - dst_col) == 1

    def _moves_for(self, player: int) -> List[Move]:
        moves = []
        # np.argwhere walks the grid in row-major order
        for row, col in np.argwhere(self.board == player):
            row, col = int(row), int(col)
            for d_row, d_col in DIRECTIONS:
                move = Move((row, col), (row + d_row, col + d_col))
                if self._is_legal_for(move, player):
                    moves.append(move)
        return moves

    def legal_moves(self) -> List[Move]:
        return self._moves_for(self.current_player)

    def has_any_legal_move(self, player: int) -> bool:
        for row, col in np.argwhere(self.board == player):
            for d_row, d_col in DIRECTIONS:
                if self._is_legal_for(Move((int(row), int(col)), (int(row) + d_row, int(col) + d_col)), player):
                    return True
        return False

    def count_legal_moves(self, player: int) -> int:
        return len(self._moves_for(player))

    def apply(self, move: Move) -> None:
        """Relocate a piece. The move must already have been checked with is_legal()."""
        src, dst = move
        self.board[dst] = self.board[src]
        self.board[src] = EMPTY

    def switch_player(self) -> None:
        self.current_player = opponent_of(self.current_player)

    def is_terminal(self) -> bool:
        if self.remaining_turns <= 0:
            return True
        return not self.has_any_legal_move(PLAYER_A) and not self.has_any_legal_move(PLAYER_B)

    def winner(self) -> int:
        a_moves = self.count_legal_moves(PLAYER_A)
        b_moves = self.count_legal_moves(PLAYER_B)
        if a_moves > b_moves:
            return PLAYER_A
        elif b_moves > a_moves:
            return PLAYER_B
        else:
            return DRAW

    def piece_count(self, player: int) -> int:
        return int(np.count_nonzero(self.board == player))

    def clone(self):
        # The board array is the only mutable member
        return GameState(self.board.copy(), self.current_player, self.remaining_turns)


def new_game(pieces_per_player: int, turn_limit: int, human_player: int,
             board_size: int = BOARD_SIZE, seed: Optional[int] = None) -> GameState:
    """
    Build the initial state of a game.

    Parameters:
        pieces_per_player (int): Number of pieces placed for each side.
        turn_limit (int): Number of rounds; the game lasts at most twice as many plies.
        human_player (int): Side that plays the first ply.
        board_size (int): Side length of the square grid.
        seed (int, optional): Seed for the placement generator.

    Returns:
        GameState: Both sides placed at random, human_player to move.
    """
    if board_size < 3:
        raise ConfigurationError(f"Board size must be at least 3, got {board_size}.")
    if pieces_per_player <= 0:
        raise ConfigurationError(f"Number of pieces must be positive, got {pieces_per_player}.")
    if 2 * pieces_per_player > board_size * board_size:
        raise ConfigurationError(
            f"{pieces_per_player} pieces per player do not fit on a {board_size}x{board_size} board."
        )
    if turn_limit <= 0:
        raise ConfigurationError(f"Turn limit must be positive, got {turn_limit}.")
    if human_player not in (PLAYER_A, PLAYER_B):
        raise ConfigurationError(f"Unknown player: {human_player!r}.")

    rng = np.random.default_rng(seed)
    state = GameState.empty(board_size, current_player=human_player, remaining_turns=turn_limit * 2)
    for player in (PLAYER_A, PLAYER_B):
        free_cells = np.flatnonzero(state.board == EMPTY)
        chosen = rng.choice(free_cells, size=pieces_per_player, replace=False)
        state.board.flat[chosen] = player
    return state


def format_square(square: Square) -> str:
    row, col = square
    return f"{chr(ord('a') + row)}{col + 1}"


def parse_square(text: str) -> Square:
    """Parse "b2" style coordinates into (row, col). Bounds are not checked here."""
    text = text.strip().lower()
    if len(text) < 2 or not 'a' <= text[0] <= 'z' or not text[1:].isdigit():
        raise ValueError(f"Invalid square '{text}'. Use a row letter followed by a column number, e.g. b2.")
    return ord(text[0]) - ord('a'), int(text[1:]) - 1


def format_move(player: int, move: Move) -> str:
    return f"Player {SYMBOLS[player]} moves the piece at {format_square(move.src)} to {format_square(move.dst)}"


def render_board(state: GameState) -> str:
    size = state.size
    lines = ["  " + "".join(f"  {col + 1} " for col in range(size))]
    separator = "  " + "+---" * size + "+"
    for row in range(size):
        cells = "".join(f"| {SYMBOLS[int(cell)]} " for cell in state.board[row])
        lines.append(f"{chr(ord('a') + row)} {cells}|")
        lines.append(separator)
    lines.append(f"To move: Player {SYMBOLS[state.current_player]} ({state.remaining_turns} plies left)")
    return "\n".join(lines)


class TerritoryGame:
    def __init__(self, state: GameState, player1_agent, player2_agent, game_id=None):
        self.state = state
        self.player_agents = {
            PLAYER_A: player1_agent,
            PLAYER_B: player2_agent
        }
        self.turn_number = 0
        self.game_id = game_id

    def display_board(self, last_move=None, depth_reached=None, calc_time=None):
        if last_move:
            player, move = last_move
            agent_name = self.player_agents[player].__class__.__name__
            if depth_reached is not None and calc_time is not None:
                print(f"\n{format_move(player, move)} ({agent_name}[{calc_time:.2f}s, {depth_reached} depth])")
            else:
                print(f"\n{format_move(player, move)} ({agent_name})")

        print(f"\nT{self.turn_number}:")
        print(render_board(self.state))

    def display_game_end(self):
        print("\nENDGAME\n")
        print(render_board(self.state))

        a_moves = self.state.count_legal_moves(PLAYER_A)
        b_moves = self.state.count_legal_moves(PLAYER_B)
        winner = self.state.winner()
        if winner == DRAW:
            print("WINNER: DRAW")
        else:
            print(f"WINNER: Player {SYMBOLS[winner]} ({self.player_agents[winner].__class__.__name__})")

        print("\nMOVES LEFT:")
        print(f"  Player X ({self.player_agents[PLAYER_A].__class__.__name__}): {a_moves}")
        print(f"  Player O ({self.player_agents[PLAYER_B].__class__.__name__}): {b_moves}")
        print()

    def play_move(self, move: Move) -> None:
        if move is None or not self.state.is_legal(move):
            raise ValueError("Invalid move!")
        self.state.apply(move)

    def end_ply(self) -> None:
        self.state.switch_player()
        self.state.remaining_turns -= 1

    def get_move_for_current_player(self):
        current_agent = self.player_agents[self.state.current_player]
        return current_agent.get_move(self.state)

    def run_game(self, verbose=True) -> int:
        if verbose:
            self.display_board()

        while not self.state.is_terminal():
            self.turn_number += 1
            player = self.state.current_player

            if not self.state.has_any_legal_move(player):
                logger.info(f"Player {SYMBOLS[player]} has no valid moves. Skipping turn.")
                self.end_ply()
                continue

            move, compute_time, depth_reached = self.get_move_for_current_player()
            if move is None:
                logger.info(f"Player {SYMBOLS[player]} returned no move. Skipping turn.")
                self.end_ply()
                continue

            try:
                self.play_move(move)
            except ValueError as e:
                logger.warning(f"{e} ({self.player_agents[player].__class__.__name__} proposed {move})")
                self.turn_number -= 1
                continue

            self.end_ply()

            if verbose:
                self.display_board(
                    last_move=(player, move),
                    depth_reached=depth_reached,
                    calc_time=compute_time
                )

        logger.info(
            f"Player X has {self.state.count_legal_moves(PLAYER_A)} moves left, "
            f"Player O has {self.state.count_legal_moves(PLAYER_B)} moves left"
        )
        if verbose:
            self.display_game_end()
        return self.state.winner()

    def get_game_data(self):
        """
        Summary of a finished game, kept in memory for tallies.
        """
        return {
            'game_id': self.game_id,
            'player1_agent': self.player_agents[PLAYER_A].__class__.__name__,
            'player2_agent': self.player_agents[PLAYER_B].__class__.__name__,
            'winner': self.state.winner(),
            'player1_moves_left': self.state.count_legal_moves(PLAYER_A),
            'player2_moves_left': self.state.count_legal_moves(PLAYER_B),
            'number_of_turns': self.turn_number
        }
