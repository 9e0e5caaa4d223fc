"""Search, tag and completion filters plus sort orders for passage lists."""
import json
import unicodedata
from dataclasses import dataclass, field
from enum import Enum

from prost_reader.db import get_setting, set_setting

FILTERS_SETTING = "passage_filters"


class CompletionFilter(Enum):
    ALL = "All"
    COMPLETED = "Completed"
    INCOMPLETE = "Not Started"


class SortOption(Enum):
    TITLE = "Title"
    DATE_ADDED = "Recently Added"
    BEST_SCORE = "Best Score"
    ATTEMPTS = "Most Attempts"


@dataclass(frozen=True)
class PassageFilters:
    search_text: str = ""
    selected_tags: frozenset = field(default_factory=frozenset)
    completion_filter: CompletionFilter = CompletionFilter.ALL
    sort_option: SortOption = SortOption.TITLE

    @property
    def is_active(self) -> bool:
        return (
            bool(self.search_text)
            or bool(self.selected_tags)
            or self.completion_filter is not CompletionFilter.ALL
            or self.sort_option is not SortOption.TITLE
        )

    def to_dict(self) -> dict:
        return {
            "search_text": self.search_text,
            "selected_tags": sorted(self.selected_tags),
            "completion_filter": self.completion_filter.name,
            "sort_option": self.sort_option.name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PassageFilters":
        return cls(
            search_text=data.get("search_text", ""),
            selected_tags=frozenset(data.get("selected_tags", ())),
            completion_filter=CompletionFilter[data.get("completion_filter", "ALL")],
            sort_option=SortOption[data.get("sort_option", "TITLE")],
        )


def fold_text(text: str) -> str:
    """Case- and width-insensitive form used for searching and title ordering."""
    return unicodedata.normalize("NFKC", text).casefold()


def apply_filters(passages, filters: PassageFilters, completion_info: dict) -> list:
    """Filter then sort ``passages``.

    ``completion_info`` maps passage ids to CompletionInfo; a passage with no
    entry has never been completed. The result depends only on the arguments.
    """
    filtered = list(passages)

    if filters.search_text:
        needle = fold_text(filters.search_text)
        filtered = [p for p in filtered if needle in fold_text(p.title)]

    if filters.selected_tags:
        # Every selected tag must be present.
        filtered = [p for p in filtered if filters.selected_tags <= set(p.tags)]

    if filters.completion_filter is CompletionFilter.COMPLETED:
        filtered = [p for p in filtered if p.id in completion_info]
    elif filters.completion_filter is CompletionFilter.INCOMPLETE:
        filtered = [p for p in filtered if p.id not in completion_info]

    def title_key(p):
        return fold_text(p.title)

    if filters.sort_option is SortOption.TITLE:
        return sorted(filtered, key=title_key)
    if filters.sort_option is SortOption.DATE_ADDED:
        return filtered
    if filters.sort_option is SortOption.BEST_SCORE:
        def best(p):
            info = completion_info.get(p.id)
            return info.best_score if info else -1.0
        return sorted(filtered, key=lambda p: (-best(p), title_key(p)))
    def attempts(p):
        info = completion_info.get(p.id)
        return info.attempt_count if info else 0
    return sorted(filtered, key=lambda p: (-attempts(p), title_key(p)))


def all_tags(passages) -> list:
    return sorted({tag for p in passages for tag in p.tags})


def load_filters(db_path: str) -> PassageFilters:
    raw = get_setting(db_path, FILTERS_SETTING)
    if not raw:
        return PassageFilters()
    return PassageFilters.from_dict(json.loads(raw))


def save_filters(db_path: str, filters: PassageFilters) -> None:
    set_setting(db_path, FILTERS_SETTING, json.dumps(filters.to_dict()))
