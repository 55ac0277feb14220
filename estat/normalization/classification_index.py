"""
estat/normalization/classification_index.py

Code-to-label lookup built from e-Stat classification metadata.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from estat.domain.statistics import as_list


class ClassificationIndex:
    """
    Read-only (classification id, code) -> label mapping.

    Unknown ids and codes resolve to the raw code, so an empty index
    degrades every lookup to passthrough instead of failing.
    """

    def __init__(self, labels: Mapping[str, Mapping[str, str]] | None = None) -> None:
        self._labels: dict[str, dict[str, str]] = {
            str(class_id): dict(codes) for class_id, codes in (labels or {}).items()
        }

    @classmethod
    def empty(cls) -> "ClassificationIndex":
        return cls()

    @classmethod
    def from_metadata(cls, document: Any) -> "ClassificationIndex":
        """
        Build an index from a `METADATA_INF` document.

        Accepts the groups under `CLASS_INF.CLASS_OBJ` or directly under
        `CLASS_OBJ`. Absent or malformed metadata yields an empty index.
        """

        if not isinstance(document, Mapping):
            return cls.empty()

        class_inf = document.get("CLASS_INF")
        container = class_inf if isinstance(class_inf, Mapping) else document

        labels: dict[str, dict[str, str]] = {}
        for group in as_list(container.get("CLASS_OBJ")):
            if not isinstance(group, Mapping):
                continue
            class_id = group.get("@id")
            if class_id is None:
                continue

            codes = labels.setdefault(str(class_id), {})
            for entry in as_list(group.get("CLASS")):
                if not isinstance(entry, Mapping):
                    continue
                code = entry.get("@code")
                if code is None:
                    continue
                name = entry.get("@name")
                codes[str(code)] = str(name) if name is not None else str(code)

        return cls(labels)

    def resolve(self, class_id: str, code: Any) -> str:
        code_text = "" if code is None else str(code)
        return self._labels.get(class_id, {}).get(code_text, code_text)

    def labels(self, class_id: str) -> dict[str, str]:
        return dict(self._labels.get(class_id, {}))

    def class_ids(self) -> list[str]:
        return list(self._labels)

    def __contains__(self, class_id: object) -> bool:
        return class_id in self._labels

    def __len__(self) -> int:
        return len(self._labels)

    def __repr__(self) -> str:
        return f"ClassificationIndex(class_ids={self.class_ids()!r})"
