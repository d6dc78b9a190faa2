"""
Map document: the element tree the globe draws into.

Elements are addressed by id and grouped by CSS class, mirroring the SVG
the site renders: a graticule, the sphere outline, country and city
shapes, and trip routes. The navigator toggles only three flags:

- countries: "iglobe-selected" class
- cities:    "iglobe-highlight" class (and z-order)
- routes:    visibility
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Set

logger = logging.getLogger(__name__)

# Element classes
COUNTRY = "iglobe-countries"
CITY = "iglobe-cities"
ROUTE = "iglobe-route"
GRATICULE = "iglobe-graticule"
FOREGROUND = "iglobe-foreground"
OCEAN = "iglobe-ocean"

# State classes
SELECTED = "iglobe-selected"
HIGHLIGHT = "iglobe-highlight"


@dataclass
class MapElement:
    """One rendered path."""
    element_id: Optional[str]
    css_class: str
    geometry: Optional[Dict[str, Any]] = None
    classes: Set[str] = field(default_factory=set)
    visible: bool = True
    d: str = ""

    @property
    def name(self) -> Optional[str]:
        if self.geometry is None:
            return None
        return self.geometry.get("properties", {}).get("name")

    def classed(self, name: str, value: bool) -> None:
        if value:
            self.classes.add(name)
        else:
            self.classes.discard(name)

    def has_class(self, name: str) -> bool:
        return name in self.classes


class MapDocument:
    """
    Ordered collection of map elements.

    Order is paint order: later elements draw on top.
    """

    def __init__(self):
        self._elements: List[MapElement] = []

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[MapElement]:
        return iter(list(self._elements))

    def clear(self) -> None:
        self._elements.clear()

    def append(self, element: MapElement) -> MapElement:
        self._elements.append(element)
        return element

    def insert_before(self, element: MapElement, css_class: str) -> MapElement:
        """Insert before the first element of `css_class` (append if none)."""
        for i, existing in enumerate(self._elements):
            if existing.css_class == css_class:
                self._elements.insert(i, element)
                return element
        return self.append(element)

    def get(self, element_id: str) -> Optional[MapElement]:
        for element in self._elements:
            if element.element_id == element_id:
                return element
        return None

    def exists(self, element_id: str) -> bool:
        return self.get(element_id) is not None

    def select_class(self, css_class: str) -> List[MapElement]:
        return [e for e in self._elements if e.css_class == css_class]

    def move_up(self, element_id: str) -> None:
        """Repaint an element after the rest of its class so it sits above its siblings."""
        element = self.get(element_id)
        if element is None:
            return
        last = self._elements.index(element) - 1
        self._elements.remove(element)
        for i, existing in enumerate(self._elements):
            if existing.css_class == element.css_class:
                last = max(last, i)
        self._elements.insert(last + 1, element)

    def paths(self) -> List[MapElement]:
        """Elements that carry geometry to render."""
        return [e for e in self._elements if e.geometry is not None]

    # ------------------------------------------------------------------
    # Highlight state
    # ------------------------------------------------------------------

    def selected_countries(self) -> List[str]:
        return [e.element_id for e in self.select_class(COUNTRY) if e.has_class(SELECTED)]

    def highlighted_cities(self) -> List[str]:
        return [e.element_id for e in self.select_class(CITY) if e.has_class(HIGHLIGHT)]

    def visible_routes(self) -> List[str]:
        return [e.element_id for e in self.select_class(ROUTE) if e.visible]

    def active_highlights(self) -> Dict[str, List[str]]:
        return {
            "countries": self.selected_countries(),
            "locations": self.highlighted_cities(),
            "trips": self.visible_routes(),
        }
