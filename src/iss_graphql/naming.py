"""Case conversion helpers for generated GraphQL names, built on inflection."""

import re

import inflection

SEPARATORS = re.compile(r"[^0-9A-Za-z_]+")
GRAPHQL_NAME = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")


def to_pascal(name: str) -> str:
    """dailytable -> Dailytable, daily_table -> DailyTable, marketdata.yields -> MarketdataYields."""
    return inflection.camelize(_words(name))


def to_camel(name: str) -> str:
    """Security -> security, board_groups -> boardGroups."""
    words = _words(name)
    if not words:
        return ""
    return inflection.camelize(words, uppercase_first_letter=False)


def to_snake(name: str) -> str:
    """SECID -> secid, prevDate -> prev_date."""
    return inflection.underscore(_words(name))


def to_screaming_snake(name: str) -> str:
    return to_snake(name).upper()


def singularize(name: str) -> str:
    return inflection.singularize(name)


def is_graphql_name(name: str) -> bool:
    return bool(GRAPHQL_NAME.match(name))


def _words(name: str) -> str:
    return SEPARATORS.sub("_", name).strip("_")
