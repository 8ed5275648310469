from enum import StrEnum

class MatchStatus(StrEnum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    DRAW = "DRAW"
    RESIGNED = "RESIGNED"

class PlayOrder(StrEnum):
    GO_FIRST = "go_first"
    GO_SECOND = "go_second"
    RANDOM = "random"
