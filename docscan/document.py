"""
Rectified documents and the in-memory gallery that holds them.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field, replace
from typing import Optional

import numpy as np

from .adjustments import DEFAULT_FILTER, process_image
from .errors import SelectionLimitError
from .sheet_composer import compose

# Documents that can go onto one sheet (front and back)
MAX_SELECTION = 2

_ids = itertools.count(1)


def next_document_id():
    """Allocate a new, never reused document id"""
    return next(_ids)


@dataclass
class RectifiedDocument:
    """
    A cropped scan plus the inputs that produced it.

    image is the current raster: the rectified crop, or the crop after
    filter and rotation once changes are saved. source and corners are kept
    so the crop can be redone.
    """
    image: np.ndarray
    source: Optional[np.ndarray] = None
    corners: Optional[np.ndarray] = None
    rotation: float = 0.0
    filter: str = DEFAULT_FILTER
    id: int = field(default_factory=next_document_id)

    @property
    def size(self):
        """(width, height) of the current raster"""
        height, width = self.image.shape[:2]
        return width, height


class Gallery:
    """
    Ordered collection of rectified documents, with a selection of up to
    two of them for sheet composition.
    """

    def __init__(self):
        self._documents = []
        self._selected = []

    def __len__(self):
        return len(self._documents)

    def __iter__(self):
        return iter(list(self._documents))

    def __contains__(self, doc_id):
        return self._index(doc_id) is not None

    def _index(self, doc_id):
        for i, doc in enumerate(self._documents):
            if doc.id == doc_id:
                return i
        return None

    def get(self, doc_id):
        """
        Look up a document by id.

        Raises:
            KeyError: If no document has that id
        """
        index = self._index(doc_id)
        if index is None:
            raise KeyError(doc_id)
        return self._documents[index]

    def upsert(self, doc):
        """Replace the document with the same id in place, or append it"""
        index = self._index(doc.id)
        if index is None:
            self._documents.append(doc)
            logging.info("Added document %d to gallery", doc.id)
        else:
            self._documents[index] = doc
            logging.info("Replaced document %d in gallery", doc.id)
        return doc

    def remove(self, doc_id):
        """Delete a document (and drop it from the selection)"""
        index = self._index(doc_id)
        if index is None:
            raise KeyError(doc_id)
        del self._documents[index]
        if doc_id in self._selected:
            self._selected.remove(doc_id)

    def save_changes(self, doc_id, rotation, preset):
        """
        Bake a filter and rotation into a document's raster.

        The document keeps its id; its image is replaced by the processed
        version and the rotation/filter used are recorded.

        Returns:
            The updated RectifiedDocument
        """
        doc = self.get(doc_id)
        updated = replace(doc, image=process_image(doc.image, rotation, preset),
                          rotation=rotation, filter=preset)
        return self.upsert(updated)

    # Selection

    def toggle_selection(self, doc_id):
        """
        Select or unselect a document for the sheet.

        Returns:
            True if the document is now selected, False if it was unselected

        Raises:
            KeyError: If no document has that id
            SelectionLimitError: If two documents are already selected
        """
        self.get(doc_id)
        if doc_id in self._selected:
            self._selected.remove(doc_id)
            return False
        if len(self._selected) >= MAX_SELECTION:
            raise SelectionLimitError(f"You can select a maximum of {MAX_SELECTION} images.")
        self._selected.append(doc_id)
        return True

    def clear_selection(self):
        self._selected = []

    def selected(self):
        """Selected documents, in gallery order"""
        return [doc for doc in self._documents if doc.id in self._selected]

    def compose_selected(self, card_width_cm):
        """
        Lay out the selected documents on a printable sheet.

        Raises:
            SelectionLimitError: If nothing is selected
        """
        docs = self.selected()
        if not docs:
            raise SelectionLimitError("Please select at least one image.")
        return compose(docs, card_width_cm)
