# main.py
import logging
import time
from collections import Counter

from board_rules_interface import (
    BOARD_SIZE, ConfigurationError, DRAW, PLAYER_A, PLAYER_B, SYMBOLS, TerritoryGame, new_game, opponent_of
)
from agents import HumanAgent, MinimaxAgent

logger = logging.getLogger(__name__)


def ask_int(prompt):
    while True:
        try:
            return int(input(prompt))
        except ValueError:
            print("Please enter a whole number.")


def ask_user_settings(board_size=BOARD_SIZE):
    """
    Ask for the game settings until they describe a playable game.

    Returns:
        tuple: (GameState, human_player)
    """
    while True:
        num_pieces = ask_int("Enter the number of pieces for each player: ")
        turn_limit = ask_int("Enter the turn limit for the game: ")
        answer = input("Do you want to be Player 1 or 2? (Enter 1 or 2): ").strip()
        human_player = {'1': PLAYER_A, '2': PLAYER_B}.get(answer)
        if human_player is None:
            print("Please enter 1 or 2.")
            continue
        try:
            state = new_game(num_pieces, turn_limit, human_player, board_size=board_size)
        except ConfigurationError as e:
            print(e)
            continue
        return state, human_player


def play_against_computer(max_depth=5, max_time=None):
    state, human_player = ask_user_settings()
    agents = {
        human_player: HumanAgent(),
        opponent_of(human_player): MinimaxAgent(max_depth=max_depth, max_time=max_time)
    }
    game = TerritoryGame(state, player1_agent=agents[PLAYER_A], player2_agent=agents[PLAYER_B])
    return game.run_game()


def run_multiple_games(num_games, agent1_factory, agent2_factory, pieces_per_player=4, turn_limit=20,
                       board_size=BOARD_SIZE, seed=None):
    """
    Play a series of games between two computer agents and tally the winners.

    Parameters:
        num_games (int): Number of games to run.
        agent1_factory (callable): Builds the agent for player X.
        agent2_factory (callable): Builds the agent for player O.
        pieces_per_player (int): Pieces placed for each side.
        turn_limit (int): Rounds per game.
        board_size (int): Side length of the board.
        seed (int, optional): Base seed; game i is placed with seed + i.

    Returns:
        Counter: winners keyed by PLAYER_A, PLAYER_B or DRAW.
    """
    tally = Counter()
    start_time = time.time()
    logger.info("Simulation started.")

    for game_id in range(1, num_games + 1):
        game_seed = None if seed is None else seed + game_id
        state = new_game(pieces_per_player, turn_limit, PLAYER_A, board_size=board_size, seed=game_seed)
        game = TerritoryGame(state, agent1_factory(), agent2_factory(), game_id=game_id)
        game.run_game(verbose=False)

        game_data = game.get_game_data()
        tally[game_data['winner']] += 1
        winner = 'DRAW' if game_data['winner'] == DRAW else SYMBOLS[game_data['winner']]
        logger.info(f"Game {game_id}/{num_games} completed. Winner: {winner}")

    elapsed_time = time.time() - start_time
    hours, rem = divmod(elapsed_time, 3600)
    minutes, seconds = divmod(rem, 60)
    logger.info(f"Simulation completed in {int(hours)}h {int(minutes)}m {int(seconds)}s.")
    return tally


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s',
        handlers=[logging.StreamHandler()]
    )

    # Human vs. Minimax
    play_against_computer(max_depth=5)

    # Minimax vs. Random
    # from agents import RandomAgent
    # run_multiple_games(10, lambda: MinimaxAgent(max_depth=3), RandomAgent)
