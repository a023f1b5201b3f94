"""Exceptions raised by the scheduling engine."""


class PlannerError(Exception):
    """Base class for every error the engine raises on purpose."""


class InvalidConfiguration(PlannerError, ValueError):
    """Schedule request rejected before generation started."""


class InvalidArity(PlannerError, ValueError):
    """A group of the wrong size was handed to the ledger."""


class InvalidGroupSize(PlannerError, ValueError):
    """Requested group size is not within 1..len(players)."""


class InsufficientPlayers(PlannerError, ValueError):
    """Fewer players available than the group size asks for."""


class OddPlayerCount(PlannerError, ValueError):
    """A perfect pairing needs an even number of players."""
