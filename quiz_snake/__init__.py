from .snake import Snake, Direction
from .questions import (
    Subject, Difficulty, AnswerOption, Question, QuestionGenerator
)
from .placement import AnswerItem, BoardPlacement, PlacementError
from .engine import (
    Session, SimulationEngine, TickResult, TickOutcome, GameOverReason
)
from .timer import TickTimer
from .session import SessionController, GameSnapshot
from .config import load_config, DEFAULT_CONFIG
