"""
Packs a list of short texts (product benefits) into a single text column.

The delimiter is a CJK character that does not occur in the catalogue's
business text; encode_list refuses values containing it.
"""
from typing import Iterable, List, Optional

LIST_DELIMITER = '益'


def encode_list(values: Iterable[str]) -> str:
    values = list(values)
    for index, value in enumerate(values):
        if not isinstance(value, str):
            raise ValueError(f"Entry {index} is not a string.")
        if value == '':
            raise ValueError(f"Entry {index} is empty.")
        if LIST_DELIMITER in value:
            raise ValueError(f"Entry {index} contains the reserved character '{LIST_DELIMITER}'.")
    return LIST_DELIMITER.join(values)


def decode_list(raw: Optional[str]) -> List[str]:
    # An empty column means an empty list, not ['']
    if not raw:
        return []
    return raw.split(LIST_DELIMITER)
