"""
Field Mapper

Translates named string fields of domain records (dicts, dataclasses,
pydantic models, plain objects) through a single BatchTranslator call and
returns shallow clones with the translated values. Inputs are never mutated.
"""

import copy
import dataclasses
from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel

from cms_translate.services.batch_translator import BatchTranslator
from cms_translate.services.hasher import is_blank

T = TypeVar("T")


def _get_string_value(item: Any, field: str) -> str | None:
    """Value of a field if it is a non-blank string, else None."""
    if isinstance(item, Mapping):
        value = item.get(field)
    else:
        value = getattr(item, field, None)
    return None if is_blank(value) else value


def _clone_dataclass(item: T, updates: dict[str, str]) -> T:
    """
    dataclasses.replace() for init fields.

    init=False fields keep the original's value unless updated; they are set
    with object.__setattr__ so frozen dataclasses work too.
    """
    init_fields = {f.name for f in dataclasses.fields(item) if f.init}
    clone = dataclasses.replace(
        item, **{name: value for name, value in updates.items() if name in init_fields}
    )
    for f in dataclasses.fields(item):
        if f.init:
            continue
        if f.name in updates:
            object.__setattr__(clone, f.name, updates[f.name])
        elif hasattr(item, f.name):
            object.__setattr__(clone, f.name, getattr(item, f.name))
    return clone


def _clone_with(item: T, updates: dict[str, str]) -> T:
    """Shallow copy of item with the given fields replaced."""
    if isinstance(item, MutableMapping):
        clone = copy.copy(item)
        clone.update(updates)
        return clone
    if isinstance(item, Mapping):
        # Read-only mappings (e.g. MappingProxyType) come back as dicts
        return {**item, **updates}
    if dataclasses.is_dataclass(item) and not isinstance(item, type):
        return _clone_dataclass(item, updates)
    if isinstance(item, BaseModel):
        return item.model_copy(update=updates)

    clone = copy.copy(item)
    for field, value in updates.items():
        setattr(clone, field, value)
    return clone


class FieldMapper:
    """
    Flatten record fields into one text list, translate, scatter back.

    Example:
        mapper = FieldMapper(translator)
        news = await mapper.translate_array(news_items, ["title", "excerpt"], "hu")
    """

    def __init__(self, translator: BatchTranslator):
        self.translator = translator

    async def translate_fields(
        self,
        item: T,
        field_names: Sequence[str],
        target_locale: str,
        source_locale: str | None = None,
    ) -> T:
        """
        Translate the named fields of a single record.

        Absent, non-string and blank fields are left as they are.

        Returns:
            A shallow clone of ``item`` with the named fields translated
        """
        translated = await self.translate_array([item], field_names, target_locale, source_locale)
        return translated[0]

    async def translate_array(
        self,
        items: Sequence[T],
        field_names: Sequence[str],
        target_locale: str,
        source_locale: str | None = None,
    ) -> list[T]:
        """
        Translate the named fields of every record with one translate_many call.

        Returns:
            Shallow clones of ``items``, in order, with the named fields translated
        """
        texts: list[str] = []
        slots: list[tuple[int, str]] = []
        for item_index, item in enumerate(items):
            for field in field_names:
                value = _get_string_value(item, field)
                if value is None:
                    continue
                slots.append((item_index, field))
                texts.append(value)

        updates: list[dict[str, str]] = [{} for _ in items]
        if texts:
            translations = await self.translator.translate_many(
                texts, target_locale, source_locale
            )
            for (item_index, field), translation in zip(slots, translations):
                updates[item_index][field] = translation

        return [_clone_with(item, item_updates) for item, item_updates in zip(items, updates)]

    async def translate_content_map(
        self,
        content_map: Mapping[str, str],
        target_locale: str,
        source_locale: str | None = None,
    ) -> dict[str, str]:
        """
        Translate every value of a {key: text} page-content map.

        Returns:
            A new dict with the same keys and translated values
        """
        keys = list(content_map)
        if not keys:
            return {}

        translations = await self.translator.translate_many(
            [content_map[key] for key in keys], target_locale, source_locale
        )
        return dict(zip(keys, translations))
