from enum import Enum
from typing import Tuple

from loguru import logger


class ActivityType(str, Enum):
    """Closed set of household activities reported to the monitoring application."""
    ABSENT = "ABSENT"
    CLEANING = "CLEANING"
    CONVERSING = "CONVERSING"
    COOKING = "COOKING"
    DANCING = "DANCING"
    EATING = "EATING"
    FEEDING = "FEEDING"
    GOING_TO_SLEEP = "GOING_TO_SLEEP"
    IRONING = "IRONING"
    KNITTING = "KNITTING"
    LISTENING_MUSIC = "LISTENING_MUSIC"
    MOVING = "MOVING"
    NEEDING_HELP = "NEEDING_HELP"
    PHONING = "PHONING"
    PLAYING = "PLAYING"
    PLAYING_MUSIC = "PLAYING_MUSIC"
    PUTTING_AWAY = "PUTTING_AWAY"
    READING = "READING"
    RECEIVING = "RECEIVING"
    SINGING = "SINGING"
    SLEEPING = "SLEEPING"
    UNKNOWN = "UNKNOWN"
    USING_SCREEN = "USING_SCREEN"
    WAITING = "WAITING"
    WAKING_UP = "WAKING_UP"
    WASHING = "WASHING"
    WATCHING_TV = "WATCHING_TV"
    WRITING = "WRITING"


# Output vector order of the activity recognition model.
# 27 slots (every label except ABSENT); WRITING sits at index 20.
MODEL_OUTPUT_ORDER: Tuple[ActivityType, ...] = (
    ActivityType.CLEANING,         # 0
    ActivityType.CONVERSING,       # 1
    ActivityType.COOKING,          # 2
    ActivityType.DANCING,          # 3
    ActivityType.EATING,           # 4
    ActivityType.FEEDING,          # 5
    ActivityType.GOING_TO_SLEEP,   # 6
    ActivityType.IRONING,          # 7
    ActivityType.KNITTING,         # 8
    ActivityType.LISTENING_MUSIC,  # 9
    ActivityType.MOVING,           # 10
    ActivityType.NEEDING_HELP,     # 11
    ActivityType.PHONING,          # 12
    ActivityType.PLAYING,          # 13
    ActivityType.PLAYING_MUSIC,    # 14
    ActivityType.PUTTING_AWAY,     # 15
    ActivityType.READING,          # 16
    ActivityType.RECEIVING,        # 17
    ActivityType.SINGING,          # 18
    ActivityType.SLEEPING,         # 19
    ActivityType.WRITING,          # 20
    ActivityType.UNKNOWN,          # 21
    ActivityType.USING_SCREEN,     # 22
    ActivityType.WAITING,          # 23
    ActivityType.WAKING_UP,        # 24
    ActivityType.WASHING,          # 25
    ActivityType.WATCHING_TV,      # 26
)


# Module import log
logger.debug(f"[{__name__}] module loaded")
