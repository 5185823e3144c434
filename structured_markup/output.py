"""
Output unifier: one external record shape for items from every interpreter.

    {"type": [...], "properties": {name: [value, ...]}, "subject": "..."}

Text, URL and date/time values become bare strings; a text value with an
RDFa datatype becomes {"value": ..., "datatype": ...}; nested items recurse.
"subject" is present only when the item has one.

For a lossless, re-loadable form use the pydantic models directly
(model_dump_json / model_validate_json).
"""

from typing import Any, Union

from .schemas import ExtractionResult, Item, ItemValue, TextValue


def value_to_plain(value) -> Any:
    if isinstance(value, ItemValue):
        return item_to_plain(value.value)
    if isinstance(value, TextValue) and value.datatype:
        return {"value": value.value, "datatype": value.datatype}
    return value.value


def item_to_plain(item: Item) -> dict:
    record = {
        "type": list(item.types),
        "properties": {
            name: [value_to_plain(v) for v in values]
            for name, values in item.properties.items()
        },
    }
    if item.subject is not None:
        record["subject"] = item.subject
    return record


def to_plain(obj: Union[Item, ExtractionResult, list, dict]) -> Any:
    """
    Convert items (or a whole ExtractionResult) into plain JSON-ready data.

    Lists and the microformats type → items mapping are converted element
    by element.  For an ExtractionResult the item forests are unified and the
    flat-scan records are dumped as-is.
    """
    if isinstance(obj, Item):
        return item_to_plain(obj)

    if isinstance(obj, ExtractionResult):
        plain = obj.model_dump(mode="json")
        plain["microformats"] = to_plain(obj.microformats)
        plain["rdfa"] = to_plain(obj.rdfa)
        plain["microdata"] = to_plain(obj.microdata)
        return plain

    if isinstance(obj, list):
        return [to_plain(entry) for entry in obj]

    if isinstance(obj, dict):
        return {key: to_plain(entry) for key, entry in obj.items()}

    return obj
