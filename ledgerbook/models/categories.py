"""
Category Dictionary

Expense records use two levels (level-1 group, level-2 item).
Income only has a flat list of sources; to fit the same two-level
record shape, income level-1 is always INCOME_LEVEL1 and level-2 is
the source.

The table is immutable and only used for validation and pickers.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from ledgerbook.models.record import TransactionKind


class Category(BaseModel):
    """A level-1 label with its ordered level-2 labels."""
    model_config = ConfigDict(frozen=True)

    level1: str
    level2: tuple[str, ...]


EXPENSE_CATEGORIES: tuple[Category, ...] = (
    Category(level1="娱乐", level2=("聚会", "运动", "旅游", "看剧")),
    Category(level1="购物", level2=("数码产品", "衣物", "酒", "书", "虚拟产品", "其他")),
    Category(level1="日常", level2=("吃饭", "日用品", "水电气网", "话费", "理发", "赌博", "其他")),
    Category(level1="出行", level2=("地铁", "打车", "机票", "高铁")),
    Category(level1="人情", level2=("孝敬家长", "红包", "礼物")),
    Category(level1="金融", level2=("投资", "税", "罚款", "其他")),
    Category(level1="医疗", level2=("看病", "药物")),
    Category(level1="住房", level2=("房租", "物管费", "其他")),
)

INCOME_LEVEL1 = "收入"

INCOME_CATEGORIES: tuple[str, ...] = (
    "工资收入",
    "红包收入",
    "奖金收入",
    "其他收入",
)


def expense_level1_labels() -> list[str]:
    return [category.level1 for category in EXPENSE_CATEGORIES]


def expense_level2_labels(level1: str) -> list[str]:
    """Level-2 labels under an expense level-1 label (empty if unknown)."""
    category = _find_expense_category(level1)
    return list(category.level2) if category else []


def is_known_category(kind: TransactionKind, level1: str, level2: str) -> bool:
    """Whether the (level1, level2) pair exists in the dictionary for this kind."""
    if kind is TransactionKind.INCOME:
        return level1 == INCOME_LEVEL1 and level2 in INCOME_CATEGORIES
    category = _find_expense_category(level1)
    return category is not None and level2 in category.level2


def _find_expense_category(level1: str) -> Optional[Category]:
    for category in EXPENSE_CATEGORIES:
        if category.level1 == level1:
            return category
    return None
