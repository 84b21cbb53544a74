from .controller import EMPTY_INPUT_MESSAGE, SOLVE_ERROR_MESSAGE, ExerciseSolver

__all__ = ["EMPTY_INPUT_MESSAGE", "SOLVE_ERROR_MESSAGE", "ExerciseSolver"]
