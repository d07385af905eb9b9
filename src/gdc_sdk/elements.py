# GDC Analytics SDK
# File: elements.py
# Version: v1

"""Human-readable details for metric and attribute element URIs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from .errors import UnknownObjectError
from .models import AttributeObject, DisplayFormObject, Element, MetricObject
from .objects import ObjectResolver


@dataclass
class ElementEnricher:
    objects: ObjectResolver

    async def get_element_details(self, uris: Iterable[str]) -> List[Element]:
        """Describe each element URI, keeping the input order.

        Attribute elements are display forms; their name is replaced by the
        title of the attribute they are a form of, which costs one more
        request per attribute. Metric names come from the first request.
        """
        details = await self.objects.get_many_objects(list(uris))

        elements: List[Element] = []
        for obj in details:
            if not isinstance(obj, (DisplayFormObject, MetricObject)):
                raise UnknownObjectError([obj.root])
            elements.append(Element.from_object(obj))

        # positions of the elements whose names come from the owner
        pending = [idx for idx, el in enumerate(elements) if el.form_of]
        owners = await self.objects.get_many_objects(
            elements[idx].form_of for idx in pending
        )

        for idx, owner in zip(pending, owners):
            if not isinstance(owner, AttributeObject):
                raise UnknownObjectError([owner.root])
            elements[idx].name = owner.meta.title

        return elements
