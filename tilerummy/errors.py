class RummyError(Exception):
    """Base class for every error raised by the engine."""


class GameSetupError(RummyError, ValueError):
    pass


class ActionError(RummyError):
    """An action request was rejected; game state is unchanged."""


class StructuralError(ActionError):
    pass


class MalformedRequestError(StructuralError):
    pass


class UnknownPlayerError(StructuralError):
    pass


class NotYourTurnError(StructuralError):
    pass


class GameStateError(StructuralError):
    pass


class StageError(ActionError):
    pass


class CardinalityError(ActionError):
    pass


class RuleError(ActionError):
    pass
