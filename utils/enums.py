from enum import Enum, auto

class RoundingMode(Enum):
    NEAREST = auto()
    TRUNCATE = auto()

class PartitionAxis(Enum):
    COLUMNS = auto()
    ROWS = auto()
