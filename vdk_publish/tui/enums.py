from enum import Enum

from vdk_publish.models import PublishState


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    MAGENTA = "magenta"
    DIM = "dim"
    WHITE = "white"


PUBLISH_STATE_STYLE = {
    PublishState.PUBLISHED: UIStyle.GREEN.value,
    PublishState.REJECTED: UIStyle.YELLOW.value,
    PublishState.FAILED: UIStyle.RED.value,
}


def score_style(score: int) -> str:
    if score >= 7:
        return UIStyle.GREEN.value
    if score >= 4:
        return UIStyle.YELLOW.value
    return UIStyle.RED.value
