"""
Word lists and translations for vocabulary questions.
"""

from typing import Dict, List


WORD_LISTS: Dict[str, List[str]] = {
    "easy": ["cat", "dog", "sun", "book", "tree",
             "car", "milk", "ball", "fish", "baby"],
    "medium": ["chair", "plant", "happy", "green", "school",
               "water", "music", "phone", "mouse", "apple"],
    "hard": ["pencil", "yellow", "friend", "animal", "flower",
             "garden", "family", "spring", "winter", "cookie"],
}

# Traditional Chinese meaning shown in the prompt
TRANSLATIONS: Dict[str, str] = {
    "cat": "貓", "dog": "狗", "sun": "太陽", "book": "書", "tree": "樹",
    "car": "車", "milk": "牛奶", "ball": "球", "fish": "魚", "baby": "嬰兒",
    "chair": "椅子", "plant": "植物", "happy": "快樂", "green": "綠色",
    "school": "學校", "water": "水", "music": "音樂", "phone": "電話",
    "mouse": "老鼠", "apple": "蘋果",
    "pencil": "鉛筆", "yellow": "黃色", "friend": "朋友", "animal": "動物",
    "flower": "花", "garden": "花園", "family": "家庭", "spring": "春天",
    "winter": "冬天", "cookie": "餅乾",
}

VOCABULARY_PROMPT = "請選出與「{translation}」對應的英文單字"

LETTERS = "abcdefghijklmnopqrstuvwxyz"


def missing_translations(word_lists: Dict[str, List[str]] = WORD_LISTS,
                         translations: Dict[str, str] = TRANSLATIONS) -> List[str]:
    """Words that have no (or an empty) translation."""
    return sorted(
        word
        for words in word_lists.values()
        for word in words
        if not translations.get(word)
    )
