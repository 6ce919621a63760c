from enum import Enum

from code_context.models import GenerationStatus, RuleCategory


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    MAGENTA = "magenta"
    DIM = "dim"
    WHITE = "white"


CATEGORY_STYLE = {
    RuleCategory.LOCAL: UIStyle.CYAN.value,
    RuleCategory.TEMPLATE: UIStyle.MAGENTA.value,
    RuleCategory.CUSTOM: UIStyle.GREEN.value,
    RuleCategory.IMPORTED: UIStyle.BLUE.value,
}


GENERATION_STATUS_STYLE = {
    GenerationStatus.WRITTEN: UIStyle.GREEN.value,
    GenerationStatus.NEEDS_CONFIRMATION: UIStyle.YELLOW.value,
    GenerationStatus.EMPTY_WHITELIST: UIStyle.YELLOW.value,
}
