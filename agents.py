# agents.py
import logging
import math
import random
import sys
import time

from board_rules_interface import ConfigurationError, Move, SYMBOLS, format_square, parse_square
from evaluation import evaluate, score_move

logger = logging.getLogger(__name__)

MAX_DEPTH = 5
WIN_SCORE = sys.maxsize


class Agent:
    """
    Abstract base class for all agents.
    """
    def get_move(self, game_state):
        """
        Determine the next move.
        Must be overridden by subclasses.

        Parameters:
            game_state (GameState): The current state of the game.

        Returns:
            tuple: A tuple (move, elapsed time, depth), where move is None when
            the agent has nothing to play.
        """
        raise NotImplementedError("This method should be overridden by subclasses.")


class HumanAgent(Agent):
    def get_move(self, game_state):
        """
        Prompt the human player for a piece and its destination.

        Parameters:
            game_state (GameState): The current state of the game.

        Returns:
            tuple: A tuple (move, None, None) holding a legal move.
        """
        while True:
            try:
                src = parse_square(input("Choose piece to move (e.g., b2): "))
                dst = parse_square(input(f"Choose the new position for {format_square(src)} (e.g., c2): "))
            except ValueError as e:
                print(e)
                continue

            move = Move(src, dst)
            if game_state.is_legal(move):
                return move, None, None
            print("Invalid move. Please try again.")


class RandomAgent(Agent):
    def get_move(self, game_state):
        """
        Select a random legal move.

        Parameters:
            game_state (GameState): The current state of the game.

        Returns:
            tuple: A tuple (move, None, None), move being None if no moves are available.
        """
        legal_moves = game_state.legal_moves()
        if not legal_moves:
            return None, None, None
        return random.choice(legal_moves), None, None


class GreedyAgent(Agent):
    """Plays the move with the best one-ply score, first one on ties."""

    def get_move(self, game_state):
        start_time = time.time()
        best_move_found = None
        best_value = -math.inf
        for move in game_state.legal_moves():
            value = score_move(game_state, move)
            if value > best_value:
                best_value = value
                best_move_found = move
        return best_move_found, time.time() - start_time, 1


class MinimaxAgent(Agent):
    def __init__(self, max_depth=MAX_DEPTH, max_time=None):
        """
        Initialize the Minimax agent.

        Parameters:
            max_depth (int): Deepest iteration of the iterative deepening loop.
            max_time (float, optional): Time budget in seconds. None searches every depth.
        """
        if max_depth < 1:
            raise ConfigurationError(f"Search depth must be at least 1, got {max_depth}.")
        if max_time is not None and max_time <= 0:
            raise ConfigurationError(f"Time budget must be positive, got {max_time}.")
        self.max_depth = max_depth
        self.max_time = max_time
        self.nodes_visited = 0
        self.nodes_cut = 0
        self.depth_reached = 0
        self._deadline = None

    def get_move(self, game_state):
        start_time = time.time()
        move = self.best_move(game_state)
        compute_time = time.time() - start_time
        if move is not None:
            logger.info(
                f"Player {SYMBOLS[game_state.current_player]}: depth {self.depth_reached}, "
                f"{self.nodes_visited} nodes, {self.nodes_cut} cutoffs, {compute_time:.2f}s"
            )
        return move, compute_time, self.depth_reached

    def best_move(self, game_state):
        """
        Iterative deepening over depths 1..max_depth.

        Each iteration scores every root move from the opponent's (minimizing)
        point of view with a fresh window and keeps the strictly best one, so the
        earliest move wins ties. The choice of the deepest completed iteration is
        returned, or None when the player to move has no legal move.
        """
        self.nodes_visited = 0
        self.nodes_cut = 0
        self.depth_reached = 0
        self._deadline = time.time() + self.max_time if self.max_time is not None else None

        legal_moves = game_state.legal_moves()
        if not legal_moves:
            return None

        best_move_found = None
        for depth in range(1, self.max_depth + 1):
            try:
                move = self._search_root(game_state, depth)
            except TimeoutError:
                logger.debug(f"Time budget exhausted during depth {depth}")
                break
            best_move_found = move
            self.depth_reached = depth

        if best_move_found is None:
            # Budget ran out before depth 1 completed
            best_move_found = legal_moves[0]
        return best_move_found

    def _search_root(self, game_state, depth):
        best_value = -math.inf
        best_move_found = None
        for move in game_state.legal_moves():
            clone_state = game_state.clone()
            clone_state.apply(move)
            clone_state.switch_player()
            value = self.minimax(clone_state, depth - 1, False, -math.inf, math.inf)
            if value > best_value:
                best_value = value
                best_move_found = move
        return best_move_found

    def minimax(self, game_state, depth, maximizing_player, alpha=-math.inf, beta=math.inf):
        """
        Recursive Minimax function with alpha-beta pruning.

        Parameters:
            game_state (GameState): Position to search. Never modified.
            depth (int): Remaining depth.
            maximizing_player (bool): True if the current layer is maximizing.
            alpha (float): Best value guaranteed to the maximizer so far.
            beta (float): Best value guaranteed to the minimizer so far.

        Returns:
            int: evaluation value
        """
        if self._deadline is not None and time.time() >= self._deadline:
            raise TimeoutError()
        self.nodes_visited += 1

        if depth == 0 or game_state.is_terminal():
            return evaluate(game_state)

        moves = game_state.legal_moves()

        if maximizing_player:
            max_eval = -WIN_SCORE  # kept when the side to move is stuck
            for move in moves:
                clone_state = game_state.clone()
                clone_state.apply(move)
                clone_state.switch_player()
                eval_val = self.minimax(clone_state, depth - 1, False, alpha, beta)
                max_eval = max(max_eval, eval_val)
                alpha = max(alpha, eval_val)
                if beta <= alpha:
                    self.nodes_cut += 1
                    break  # Beta cut-off
            return max_eval
        else:
            min_eval = WIN_SCORE
            for move in moves:
                clone_state = game_state.clone()
                clone_state.apply(move)
                clone_state.switch_player()
                eval_val = self.minimax(clone_state, depth - 1, True, alpha, beta)
                min_eval = min(min_eval, eval_val)
                beta = min(beta, eval_val)
                if beta <= alpha:
                    self.nodes_cut += 1
                    break  # Alpha cut-off
            return min_eval
